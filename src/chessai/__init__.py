"""chessai — chess rules engine and minimax move search."""

__version__ = "0.1.0"
