"""Reusable UI widgets."""

from momentum.ui.widgets.choice_card import ChoiceCard
from momentum.ui.widgets.page_header import PageHeader

__all__ = ["ChoiceCard", "PageHeader"]
