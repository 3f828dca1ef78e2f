"""RTD Taxonomy Transformations."""

from .taxonomy import TRANSFORMATIONS, apply_transformations, iab_segment_id, transform_iab

__all__ = ['TRANSFORMATIONS', 'apply_transformations', 'iab_segment_id', 'transform_iab']
