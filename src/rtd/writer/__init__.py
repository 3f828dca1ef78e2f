"""RTD ORTB2 Fragment Writer."""

from .ortb_writer import OrtbFragmentWriter, merge_keywords

__all__ = ['OrtbFragmentWriter', 'merge_keywords']
