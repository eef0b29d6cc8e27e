"""Domain layer for hyperattest.

Pure value objects, canonical encodings and error types. Nothing in this
package performs I/O.
"""
