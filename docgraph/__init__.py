"""docgraph - front-matter and cross-reference integrity checks for a depth-tiered docs corpus."""

__version__ = "0.1.0"


# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    if name == "ValidationPipeline":
        from docgraph.pipeline import ValidationPipeline

        return ValidationPipeline
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["ValidationPipeline", "__version__"]
