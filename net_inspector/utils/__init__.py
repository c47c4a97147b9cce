from .observable_model import ObservableModel

__all__ = ["ObservableModel"]
