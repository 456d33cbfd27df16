"""FilterSet definitions for the price rule catalog."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import PriceRule


class PriceRuleFilterSet(django_filters.FilterSet):
    """``start``/``end`` keep the rules that overlap the given dates."""

    start = django_filters.DateFilter(field_name="end_date", lookup_expr="gte")
    end = django_filters.DateFilter(field_name="start_date", lookup_expr="lte")
    rule_type = django_filters.ChoiceFilter(choices=PriceRule.RuleType.choices)
    is_active = django_filters.BooleanFilter()

    class Meta:
        model = PriceRule
        fields = ["start", "end", "rule_type", "is_active"]
