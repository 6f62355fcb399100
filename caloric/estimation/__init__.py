# -*- coding: utf-8 -*-
"""Nutrition estimation: text and photo queries answered by a multimodal model."""

from .gateway import NutritionGateway
from .models import NutritionItem, NutritionQuery

__all__ = ["NutritionGateway", "NutritionItem", "NutritionQuery"]
