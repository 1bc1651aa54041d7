from sklearn.exceptions import NotFittedError

__all__ = ["NotFittedError"]
