"""Shared fixtures: a small export snapshot around 2025-03-15."""

from datetime import date

import pytest

from adsight.connectors.sheets.transformer import build_tab_data
from adsight.models.report_rows import DatasetKind

TODAY = date(2025, 3, 15)

DAILY = [
    {"campaign": "Brand", "campaignId": "1", "date": "2025-03-10",
     "impr": 1000, "clicks": 100, "cost": 50, "conv": 5, "value": 250},
    {"campaign": "Brand", "campaignId": "1", "date": "2025-03-11",
     "impr": 800, "clicks": 80, "cost": 40, "conv": 4, "value": 200},
    {"campaign": "Generic", "campaignId": "2", "date": "2025-03-10",
     "impr": 2000, "clicks": 100, "cost": 120, "conv": 2, "value": 100},
    {"campaign": "Generic", "campaignId": "2", "date": "2025-01-01",
     "impr": 5000, "clicks": 500, "cost": 999, "conv": 10, "value": 900},
    {"campaign": "Orphan", "campaignId": "", "date": "2025-03-12",
     "impr": 100, "clicks": 10, "cost": 10, "conv": 0, "value": 0},
]

AD_GROUPS = [
    {"campaign": "Brand", "campaignId": "1", "adGroup": "Exact", "adGroupId": "11",
     "date": "2025-03-10", "impr": 400, "clicks": 40, "cost": 30, "conv": 2, "value": 90},
    {"campaign": "Brand", "campaignId": "1", "adGroup": "Phrase", "adGroupId": "12",
     "date": "2025-03-10", "impr": 600, "clicks": 60, "cost": 35, "conv": 3, "value": 160},
    {"campaign": "Brand", "campaignId": "1", "adGroup": "Phrase", "adGroupId": "12",
     "date": "2025-03-11", "impr": 500, "clicks": 50, "cost": 25, "conv": 1, "value": 40},
    {"campaign": "Generic", "campaignId": "2", "adGroup": "Broad", "adGroupId": "21",
     "date": "2025-03-10", "impr": 2000, "clicks": 100, "cost": 120, "conv": 2, "value": 100},
]

ASSET_GROUPS = [
    {"campaign": "Generic", "campaignId": "2", "assetGroup": "Summer", "assetGroupId": "31",
     "status": "ENABLED", "date": "2025-03-10",
     "impr": 300, "clicks": 12, "cost": 18, "conv": 1, "value": 45},
]

SEARCH_TERMS = [
    {"searchTerm": "running shoes", "keyword": "shoes", "campaign": "Generic",
     "adGroup": "Broad", "impr": 500, "clicks": 25, "cost": 12.5, "conv": 1, "value": 60},
    {"searchTerm": "Trail Running Shoes", "keyword": "shoes", "campaign": "Generic",
     "adGroup": "Broad", "impr": 300, "clicks": 30, "cost": 3, "conv": 2, "value": 80},
    {"searchTerm": "brand store", "keyword": "brand", "campaign": "Brand",
     "adGroup": "Exact", "impr": 100, "clicks": 20, "cost": 8, "conv": 0, "value": 0},
]

LANDING_PAGES = [
    {"url": "https://example.com/a", "impressions": 1000, "clicks": 50,
     "cost": 25, "conversions": 5, "value": 100, "cvr": 0.99},
]


@pytest.fixture
def tab_data():
    return build_tab_data(
        {
            DatasetKind.DAILY: DAILY,
            DatasetKind.AD_GROUPS: AD_GROUPS,
            DatasetKind.ASSET_GROUPS: ASSET_GROUPS,
            DatasetKind.SEARCH_TERMS: SEARCH_TERMS,
            DatasetKind.LANDING_PAGES: LANDING_PAGES,
        }
    )


@pytest.fixture
def today():
    return TODAY
