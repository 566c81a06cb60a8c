"""TrainHub backend: user inventories and training modules over JSON record stores."""

__version__ = "0.1.0"
