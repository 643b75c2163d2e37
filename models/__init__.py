"""
========================================
Models for the fluent query builder
========================================

Modules:
    base: Model base class (metadata, class-level entry points, row instances)

Example:
    >>> from models import Model
    >>>
    >>> class Post(Model):
    ...     __tablename__ = 'posts'
    ...     __fillable__ = ['title', 'body']
    >>>
    >>> Post.where('title', 'like', '%python%').latest().get()
"""

__version__ = "0.1.0"
__all__ = ['Model']

from .base import Model
