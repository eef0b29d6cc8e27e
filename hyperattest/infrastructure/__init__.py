"""Infrastructure layer: adapters, stubs and observability for hyperattest."""
