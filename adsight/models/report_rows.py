"""AdSight — Report Row Models (Tagged Union per Dataset Kind).

One frozen record type per export tab. Field names follow the export's
camelCase columns through aliases. Every field is coerced on the way in:
numbers parse or fall back to 0, strings stringify or fall back to "".
Upstream ratio columns are ignored; ratios are always recomputed.
"""

import math
from enum import Enum
from typing import Annotated, Any, ClassVar, List, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class DatasetKind(str, Enum):
    """Export tabs, keyed by the tab name the endpoint expects."""

    DAILY = "daily"
    SEARCH_TERMS = "searchTerms"
    AD_GROUPS = "adGroups"
    ASSET_GROUPS = "assetGroups"
    NEGATIVE_KEYWORD_LISTS = "negativeKeywordLists"
    CAMPAIGN_NEGATIVES = "campaignNegatives"
    AD_GROUP_NEGATIVES = "adGroupNegatives"
    CAMPAIGN_STATUS = "campaignStatus"
    SHARED_LIST_KEYWORDS = "sharedListKeywords"
    LANDING_PAGES = "landingPages"


class MetricVariant(str, Enum):
    """Which counter naming a row uses."""

    STANDARD = "standard"  # impr / conv
    LANDING_PAGE = "landing_page"  # impressions / conversions


# ─────────────────────────────────────────────
# COERCION
# ─────────────────────────────────────────────


def to_number(value: Any) -> float:
    """Parse a loosely-typed value as a float, defaulting to 0."""
    if value is None or value == "":
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_count(value: Any) -> int:
    return int(to_number(value))


def to_text(value: Any) -> str:
    """Stringify a loosely-typed value, defaulting to ""."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


Number = Annotated[float, BeforeValidator(to_number)]
Count = Annotated[int, BeforeValidator(to_count)]
Text = Annotated[str, BeforeValidator(to_text)]


class ReportRow(BaseModel):
    """Base for every export row."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    kind: ClassVar[DatasetKind]

    def to_record(self) -> dict:
        """Flat dict keyed by export column names."""
        return self.model_dump(by_alias=True)


# ─────────────────────────────────────────────
# METRIC ROWS
# ─────────────────────────────────────────────


class StandardMetricRow(ReportRow):
    """Row carrying the five base counters under the standard names."""

    variant: ClassVar[MetricVariant] = MetricVariant.STANDARD

    impr: Count = 0
    clicks: Count = 0
    cost: Number = 0.0
    conv: Number = 0.0
    value: Number = 0.0


class DailyRow(StandardMetricRow):
    """Daily campaign performance."""

    kind: ClassVar[DatasetKind] = DatasetKind.DAILY

    campaign: Text = ""
    campaign_id: Text = Field(default="", alias="campaignId")
    date: Text = ""


class SearchTermRow(StandardMetricRow):
    """Search term performance (not dated)."""

    kind: ClassVar[DatasetKind] = DatasetKind.SEARCH_TERMS

    search_term: Text = Field(default="", alias="searchTerm")
    keyword: Text = ""
    keyword_text: Text = Field(default="", alias="keywordText")
    campaign: Text = ""
    ad_group: Text = Field(default="", alias="adGroup")


class AdGroupRow(StandardMetricRow):
    """Daily ad group performance."""

    kind: ClassVar[DatasetKind] = DatasetKind.AD_GROUPS

    campaign: Text = ""
    campaign_id: Text = Field(default="", alias="campaignId")
    ad_group: Text = Field(default="", alias="adGroup")
    ad_group_id: Text = Field(default="", alias="adGroupId")
    date: Text = ""


class AssetGroupRow(StandardMetricRow):
    """Daily Performance Max asset group performance."""

    kind: ClassVar[DatasetKind] = DatasetKind.ASSET_GROUPS

    campaign: Text = ""
    campaign_id: Text = Field(default="", alias="campaignId")
    asset_group: Text = Field(default="", alias="assetGroup")
    asset_group_id: Text = Field(default="", alias="assetGroupId")
    status: Text = ""
    date: Text = ""


class LandingPageRow(ReportRow):
    """Landing page performance, using the long counter names."""

    kind: ClassVar[DatasetKind] = DatasetKind.LANDING_PAGES
    variant: ClassVar[MetricVariant] = MetricVariant.LANDING_PAGE

    url: Text = ""
    impressions: Count = 0
    clicks: Count = 0
    cost: Number = 0.0
    conversions: Number = 0.0
    value: Number = 0.0


# ─────────────────────────────────────────────
# PASS-THROUGH ROWS (no metrics)
# ─────────────────────────────────────────────


class NegativeKeywordList(ReportRow):
    kind: ClassVar[DatasetKind] = DatasetKind.NEGATIVE_KEYWORD_LISTS

    list_name: Text = Field(default="", alias="listName")
    list_id: Text = Field(default="", alias="listId")
    list_type: Text = Field(default="", alias="listType")
    applied_to_campaign_name: Text = Field(default="", alias="appliedToCampaignName")
    applied_to_campaign_id: Text = Field(default="", alias="appliedToCampaignId")


class CampaignNegative(ReportRow):
    kind: ClassVar[DatasetKind] = DatasetKind.CAMPAIGN_NEGATIVES

    campaign_name: Text = Field(default="", alias="campaignName")
    campaign_id: Text = Field(default="", alias="campaignId")
    criterion_id: Text = Field(default="", alias="criterionId")
    keyword_text: Text = Field(default="", alias="keywordText")
    match_type: Text = Field(default="", alias="matchType")


class AdGroupNegative(ReportRow):
    kind: ClassVar[DatasetKind] = DatasetKind.AD_GROUP_NEGATIVES

    campaign_name: Text = Field(default="", alias="campaignName")
    campaign_id: Text = Field(default="", alias="campaignId")
    ad_group_name: Text = Field(default="", alias="adGroupName")
    ad_group_id: Text = Field(default="", alias="adGroupId")
    criterion_id: Text = Field(default="", alias="criterionId")
    keyword_text: Text = Field(default="", alias="keywordText")
    match_type: Text = Field(default="", alias="matchType")


class CampaignStatus(ReportRow):
    kind: ClassVar[DatasetKind] = DatasetKind.CAMPAIGN_STATUS

    campaign_id: Text = Field(default="", alias="campaignId")
    campaign_name: Text = Field(default="", alias="campaignName")
    status: Text = ""
    channel_type: Text = Field(default="", alias="channelType")


class SharedListKeyword(ReportRow):
    kind: ClassVar[DatasetKind] = DatasetKind.SHARED_LIST_KEYWORDS

    list_id: Text = Field(default="", alias="listId")
    criterion_id: Text = Field(default="", alias="criterionId")
    keyword_text: Text = Field(default="", alias="keywordText")
    match_type: Text = Field(default="", alias="matchType")
    type: Text = ""


MetricRow = Union[DailyRow, SearchTermRow, AdGroupRow, AssetGroupRow, LandingPageRow]

ROW_MODELS: dict[DatasetKind, type[ReportRow]] = {
    DatasetKind.DAILY: DailyRow,
    DatasetKind.SEARCH_TERMS: SearchTermRow,
    DatasetKind.AD_GROUPS: AdGroupRow,
    DatasetKind.ASSET_GROUPS: AssetGroupRow,
    DatasetKind.NEGATIVE_KEYWORD_LISTS: NegativeKeywordList,
    DatasetKind.CAMPAIGN_NEGATIVES: CampaignNegative,
    DatasetKind.AD_GROUP_NEGATIVES: AdGroupNegative,
    DatasetKind.CAMPAIGN_STATUS: CampaignStatus,
    DatasetKind.SHARED_LIST_KEYWORDS: SharedListKeyword,
    DatasetKind.LANDING_PAGES: LandingPageRow,
}

METRIC_DATASETS = {
    DatasetKind.DAILY,
    DatasetKind.SEARCH_TERMS,
    DatasetKind.AD_GROUPS,
    DatasetKind.ASSET_GROUPS,
    DatasetKind.LANDING_PAGES,
}


class TabData(BaseModel):
    """Every dataset fetched from the export in one cycle."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    daily: List[DailyRow] = []
    search_terms: List[SearchTermRow] = Field(default=[], alias="searchTerms")
    ad_groups: List[AdGroupRow] = Field(default=[], alias="adGroups")
    asset_groups: List[AssetGroupRow] = Field(default=[], alias="assetGroups")
    negative_keyword_lists: List[NegativeKeywordList] = Field(
        default=[], alias="negativeKeywordLists"
    )
    campaign_negatives: List[CampaignNegative] = Field(
        default=[], alias="campaignNegatives"
    )
    ad_group_negatives: List[AdGroupNegative] = Field(
        default=[], alias="adGroupNegatives"
    )
    campaign_status: List[CampaignStatus] = Field(default=[], alias="campaignStatus")
    shared_list_keywords: List[SharedListKeyword] = Field(
        default=[], alias="sharedListKeywords"
    )
    landing_pages: List[LandingPageRow] = Field(default=[], alias="landingPages")

    def rows(self, kind: DatasetKind) -> list:
        """Return the rows for a dataset kind."""
        for name, field in type(self).model_fields.items():
            if field.alias == kind.value or name == kind.value:
                return getattr(self, name)
        return []
