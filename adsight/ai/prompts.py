"""AdSight — Prompt Templates."""

import json

from adsight.models.analysis_models import InsightRequest

DATA_ANALYSIS_SYSTEM_PROMPT = """You are an expert Google Ads data analyst. Your role is to analyze advertising performance data and provide actionable insights.

When analyzing data, focus on:
- Performance trends and patterns
- Optimization opportunities
- Budget allocation recommendations
- Keyword and campaign performance
- Cost efficiency metrics
- Conversion optimization

Rates in the data (ctr, convRate, cvr) are fractions between 0 and 1; multiply by 100 when quoting them as percentages.

Provide clear, actionable recommendations based on the data. Use specific numbers and percentages when relevant. Structure your response with clear headings and bullet points for readability."""


def create_data_insights_prompt(request: InsightRequest) -> str:
    """Wrap the user's request with the dataset context."""
    applied = ", ".join(request.filters) if request.filters else "None"
    return f"""Please analyze this Google Ads {request.data_source} data and provide insights based on the following request:

**User Request:** {request.prompt}

**Data Context:**
- Data Source: {request.data_source}
- Currency: {request.currency}
- Total Rows in Dataset: {request.total_rows}
- Rows Being Analyzed: {request.analyzed_rows}
- Applied Filters: {applied}

Please provide specific, actionable insights based on this data and the user's request."""


def create_insights_user_content(request: InsightRequest) -> str:
    """Full user message: context prompt followed by the JSON rows."""
    data_block = json.dumps(request.data, indent=2)
    return f"{create_data_insights_prompt(request)}\n\nData:\n{data_block}"


# ── Landing pages ──

LANDING_PAGE_ANALYSIS_SYSTEM_PROMPT = """You are an expert digital marketing and UX analyst specializing in landing page optimization. Your role is to analyze web pages and provide actionable insights for improving conversion rates, user experience, and overall effectiveness.
When analyzing landing pages, focus on:
- Content clarity and value proposition strength
- User experience and conversion optimization
- Technical SEO and performance indicators
- Trust signals and credibility elements
- Mobile responsiveness and accessibility
- Competitive positioning and differentiation
Provide specific, actionable recommendations with clear priorities. Use concrete examples and reference specific elements when possible. Structure your response with clear headings and bullet points for readability."""

DEFAULT_LANDING_PAGE_COPY_PROMPT = (
    "Output the copy from the URL provided. Do not include any HTML or CSS."
)

DEFAULT_LANDING_PAGE_ANALYSIS_PROMPT = """# Landing Page Checker
Please analyze the landing page and provide insights for each section below:

## 1. The Offer
- Core value proposition: what they get, why it matters, who it's for.
- Unique selling points, value boosters, social proof and risk removal.
- Does the offer match the visitor's awareness stage?

## 2. Informational Hierarchy
- So what? Who cares? Says who? What if? Why now? Now what?
- Does the content flow reduce friction and follow natural scanning patterns?

## 3. Copy & Persuasion
- Outcomes over features, language matched to audience awareness.
- Headlines and subheads: are they outcome-focused and clear?

## 4. Visual Hierarchy
- Hero section: headline, subheadline, visual and CTA.
- Directional cues, contrast, clutter, links that leak conversions.

## 5. Trust & Objection Handling
- Certifications, credentials, testimonials, case studies, guarantees, FAQs.

## 6. Urgency & Scarcity
- Limited-time or limited-quantity elements, used authentically.

## 7. Calls-to-Action
- Value-focused, first-person CTA copy placed where intent is high.

## 8. Final Thoughts
- The three changes most likely to lift conversion rate, in priority order.
"""


def create_landing_page_copy_prompt(url: str) -> str:
    return f"""Please extract and output the copy from the landing page at this URL: {url}

{DEFAULT_LANDING_PAGE_COPY_PROMPT}"""


def create_landing_page_analysis_prompt(copy: str, user_prompt: str) -> str:
    return f"""{user_prompt}

**Landing Page Copy to Analyze:**
{copy}

Please apply the above analysis framework to this landing page copy and provide specific, actionable insights."""


def create_landing_page_vision_prompt(user_prompt: str) -> str:
    return f"""{user_prompt}

The attached image is a full-page screenshot of the landing page. Judge layout, visual hierarchy and calls-to-action from what is visible, and apply the analysis framework above."""
