from .yadio import YadioProvider

__all__ = ['YadioProvider']
