from itemlister.normalization.base import BaseNormalizer
from itemlister.normalization.normalizer import BookNormalizer, CardNormalizer, FieldNormalizer

__all__ = ["BaseNormalizer", "BookNormalizer", "CardNormalizer", "FieldNormalizer"]
