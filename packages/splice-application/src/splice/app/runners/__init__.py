from .rename import RenameRunner

__all__ = ["RenameRunner"]
