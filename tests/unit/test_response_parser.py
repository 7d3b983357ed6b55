"""
Unit tests for the full parsing pipeline.

Tests end-to-end extraction, section ordering, residual text handling,
failure tolerance and the visual-content predicate.
"""

import time

import pytest

from app.services.response_parser import (
    EXTRACTION_ORDER,
    ExtractorChain,
    ParsedResponse,
    SectionType,
    TableData,
    get_menu_eng_color,
    get_menu_eng_icon,
    has_visual_content,
    parse_response,
)
from app.services.response_parser.data_models import InsightType, MenuCategory
from app.services.response_parser.extractors import (
    AlertExtractor,
    HeadlineExtractor,
    InsightExtractor,
    ResponseExtractor,
)


class TestHeadlines:

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [
        "**HEADLINE:** Your beef category is underperforming—only 2 items drive 58% of revenue.\n\nSome other content here.",
        "## Headline: Your beef category is underperforming\n\nOther content follows.",
        "Headline:Your beef category is underperforming\n\n📊 Key numbers (Feb 1–2):",
    ])
    def test_supported_phrasings(self, text):
        result = parse_response(text)
        assert "beef category" in result.headline
        assert "**" not in result.headline
        assert result.sections[0].type == SectionType.HEADLINE
        assert result.sections[0].order == 0


class TestKPIs:

    @pytest.mark.unit
    def test_sentence_format(self, sentence_kpi_reply):
        result = parse_response(sentence_kpi_reply)
        cards = {k.label: k.value for k in result.kpi_cards}
        assert cards["Revenue"] == pytest.approx(28382.95)
        assert cards["Orders"] == 17
        assert cards["Avg Order"] == pytest.approx(1669.59)
        assert cards["Approval Rate"] == pytest.approx(94.1)
        assert cards["Tips"] == 2076

    @pytest.mark.unit
    def test_same_metric_under_two_synonyms_yields_one_card(self):
        text = (
            "28,382.95 EGP GMV from 17 successful orders\n"
            "• GMV: 30,000 EGP\n"
            "• Revenue: 31,000 EGP"
        )
        result = parse_response(text)
        revenue = [k for k in result.kpi_cards if k.label == "Revenue"]
        assert len(revenue) == 1
        assert revenue[0].value == pytest.approx(28382.95)

    @pytest.mark.unit
    def test_sections_start_at_zero_without_headline(self):
        result = parse_response("THE NUMBERS:\n• GMV: 32,195 EGP ↑ +0.5%\n• Orders: 17")
        assert [(s.type, s.order) for s in result.sections] == [(SectionType.KPIS, 0)]
        assert result.kpi_cards[0].value == 32195


class TestCharts:

    @pytest.mark.unit
    def test_equals_separator(self):
        text = (
            "Here are your top beef items:\n\n"
            "• 🔥 Steak & Fries: 4 units = 2,600 EGP GMV (22%)\n"
            "• 🔥 Roast Beef Sandwich: 4 units = 1,140 EGP GMV (22%)\n"
            "• Steak Bordalise: 3 units = 2,250 EGP GMV (17%)"
        )
        result = parse_response(text)
        assert len(result.chart_data) >= 3
        steak = next(p for p in result.chart_data if "Steak & Fries" in p.name)
        assert steak.value == 2600

    @pytest.mark.unit
    def test_simple_format(self):
        text = "Top items:\n\n• Cappuccino: 1,600 EGP\n• Flat White: 425 EGP\n• Toffee Nut Latte: 520 EGP"
        result = parse_response(text)
        assert len(result.chart_data) == 3

    @pytest.mark.unit
    def test_two_points_are_not_a_chart(self):
        result = parse_response("Top items:\n\n• Cappuccino: 1,600 EGP\n• Flat White: 425 EGP")
        assert result.chart_data is None
        assert all(s.type != SectionType.CHART for s in result.sections)


class TestMenuAndRecommendations:

    @pytest.mark.unit
    def test_menu_engineering(self):
        text = (
            "Menu engineering call:\n\n"
            "• STAR: Cappuccino, Latte\n"
            "• PLOWHORSE: Filter Coffee\n"
            "• PUZZLE: Flat White\n"
            "• DOG: Decaf Americano\n"
            "• STAR: Mocha"
        )
        result = parse_response(text)
        stars = [m for m in result.menu_engineering if m.category == MenuCategory.STAR]
        assert len(stars) == 1
        assert stars[0].items == ["Cappuccino", "Latte", "Mocha"]
        menu_section = next(s for s in result.sections if s.type == SectionType.MENU)
        assert menu_section.title == "Menu Engineering"

    @pytest.mark.unit
    def test_content_after_recommendations_is_unreachable(self):
        text = (
            "Headline: Weekly plan\n"
            "Recommendations:\n"
            "1. Push lattes in the morning rush\n"
            "2. Retire the decaf line\n"
            "\n"
            "• This insight comes after the recommendations block"
        )
        result = parse_response(text)
        assert [r.index for r in result.recommendations] == [1, 2]
        assert result.insights is None
        assert result.raw_text is None


class TestInsights:

    @pytest.mark.unit
    def test_bullet_insights(self):
        text = (
            "What the data says:\n\n"
            "• Cappuccino drives 39% of coffee revenue\n"
            "• Flat White is your only second-tier performer\n"
            "• Filter Coffee is underperforming vs last week"
        )
        result = parse_response(text)
        assert len(result.insights) == 3
        section = next(s for s in result.sections if s.type == SectionType.INSIGHTS)
        assert section.title == "What the data says"


class TestFullReplies:

    @pytest.mark.unit
    def test_screenshot_reply(self, screenshot_reply):
        result = parse_response(screenshot_reply)

        assert "beef sales" in result.headline
        assert len(result.chart_data) >= 3
        steak = next(p for p in result.chart_data if "Steak" in p.name and "Bordalise" not in p.name)
        assert steak.value == 2600
        assert has_visual_content(result) is True
        assert len(result.insights) > 0
        assert result.insights[0].type == InsightType.WARNING

    @pytest.mark.unit
    def test_daily_brief_sections_in_stage_order(self, daily_brief_reply):
        result = parse_response(daily_brief_reply)

        assert [s.type for s in result.sections] == [
            SectionType.HEADLINE,
            SectionType.KPIS,
            SectionType.CHART,
            SectionType.MENU,
            SectionType.RECOMMENDATIONS,
            SectionType.INSIGHTS,
            SectionType.TABLE,
            SectionType.TEXT,
        ]
        assert [s.order for s in result.sections] == list(range(8))

    @pytest.mark.unit
    def test_daily_brief_content(self, daily_brief_reply):
        result = parse_response(daily_brief_reply)

        assert result.headline == "Coffee carried the day while food lagged"
        assert [k.label for k in result.kpi_cards] == ["Revenue", "Orders", "Avg Order"]
        assert [p.name for p in result.chart_data] == ["Flat White", "Toffee Nut Latte", "Mocha"]
        assert [m.category for m in result.menu_engineering] == [MenuCategory.STAR, MenuCategory.DOG]
        assert result.recommendations[0].impact == "+EGP 220/day"
        assert result.table_data.headers == ["Item", "Units", "GMV"]

    @pytest.mark.unit
    def test_alerts_lead_merged_insights(self, daily_brief_reply):
        result = parse_response(daily_brief_reply)

        assert [i.icon for i in result.insights] == ["⚠️", "📈", "🔥"]
        assert result.insights[0].text.startswith("**Cappuccino**")
        section = next(s for s in result.sections if s.type == SectionType.INSIGHTS)
        assert section.title == "Alerts & Insights"

    @pytest.mark.unit
    def test_alerts_alone_still_produce_insights_section(self):
        result = parse_response("ALERTS:\n• Cappuccino: 3 qty vs 19.1 avg ↓ 84.3%")
        assert len(result.insights) == 1
        assert result.sections[0].type == SectionType.INSIGHTS
        assert result.sections[0].title == "Alerts & Insights"

    @pytest.mark.unit
    def test_alerts_after_blank_line(self):
        text = (
            "ALERTS (vs 4-week avg):\n\n"
            "• Cappuccino: 3 qty vs 19.1 avg ↓ 84.3% → check stock\n"
            "• Iced Latte: 12 vs 5.0 avg ↑ 140%\n"
        )
        result = parse_response(text)
        assert [i.type for i in result.insights] == [InsightType.WARNING, InsightType.INFO]
        assert result.raw_text is None


class TestResidualText:

    @pytest.mark.unit
    def test_short_residue_dropped(self):
        result = parse_response("Just some plain text")
        assert result.sections == []
        assert result.raw_text is None

    @pytest.mark.unit
    def test_long_prose_kept_as_text_section(self):
        text = "This reply is ordinary prose that explains the week without any numbers at all."
        result = parse_response(text)
        assert result.raw_text == text
        assert [(s.type, s.order, s.title) for s in result.sections] == [(SectionType.TEXT, 0, None)]
        assert has_visual_content(result) is False

    @pytest.mark.unit
    def test_empty_caps_headers_and_blank_runs_removed(self):
        text = (
            "SUMMARY:\n\n\n\n"
            "This paragraph is long enough to survive the residual text floor easily.\n\n\n\n"
            "Closing line."
        )
        result = parse_response(text)
        assert "SUMMARY:" not in result.raw_text
        assert "\n\n\n" not in result.raw_text
        assert result.raw_text.startswith("This paragraph")


class TestFailureTolerance:

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["", None, 42, ["list"]])
    def test_empty_or_invalid_input(self, value):
        result = parse_response(value)
        assert isinstance(result, ParsedResponse)
        assert result.sections == []
        assert result.raw_text == ""

    @pytest.mark.unit
    def test_pure_for_same_input(self, daily_brief_reply):
        assert parse_response(daily_brief_reply) == parse_response(daily_brief_reply)

    @pytest.mark.unit
    def test_failing_stage_is_isolated(self):
        class BrokenExtractor(ResponseExtractor):
            section_type = SectionType.CHART

            @property
            def name(self):
                return "broken"

            def extract(self, ctx):
                ctx.claim(range(len(ctx.lines)))
                raise RuntimeError("boom")

        chain = ExtractorChain([BrokenExtractor(), HeadlineExtractor()])
        result = chain.run("Headline: Still here\nBody")
        assert result.headline == "Still here"

    @pytest.mark.unit
    def test_alerts_kept_without_insights_stage(self):
        chain = ExtractorChain([HeadlineExtractor(), AlertExtractor()])
        result = chain.run("Headline: Slow Monday\nALERTS:\n• Cappuccino: 3 qty vs 19.1 avg ↓ 84.3%")
        assert [s.type for s in result.sections] == [SectionType.HEADLINE, SectionType.INSIGHTS]
        assert result.sections[1].title == "Alerts & Insights"
        assert result.insights[0].text.startswith("**Cappuccino**")

    @pytest.mark.unit
    def test_alerts_kept_when_insights_stage_fails(self):
        class BrokenInsights(InsightExtractor):
            def extract(self, ctx):
                raise ValueError("bad line")

        chain = ExtractorChain([AlertExtractor(), BrokenInsights()])
        result = chain.run("ALERTS:\n• Iced Latte: 12 vs 5.0 avg ↑ 140%")
        assert len(result.insights) == 1
        assert result.insights[0].type == InsightType.INFO

    @pytest.mark.unit
    @pytest.mark.parametrize("text", [
        "word " * 8000,
        "1" * 40000,
        "1," * 20000,
        "Cappuccino: " * 4000 + "EGP GMV",
        "• Latte" + " " * 40000 + "done",
        "**Name " * 6000 + ": 100 GMV",
    ])
    def test_long_lines_parse_quickly(self, text):
        started = time.perf_counter()
        parse_response(text)
        assert time.perf_counter() - started < 2.0

    @pytest.mark.unit
    def test_stage_order_constant(self):
        assert EXTRACTION_ORDER == (
            "headline", "kpis", "alerts", "chart", "menu", "recommendations", "insights", "table",
        )
        assert ExtractorChain().stage_names == list(EXTRACTION_ORDER)


class TestHasVisualContent:

    @pytest.mark.unit
    def test_headline(self):
        assert has_visual_content(parse_response("**HEADLINE:** Test headline\n\nMore content")) is True

    @pytest.mark.unit
    def test_kpis(self):
        assert has_visual_content(parse_response("THE NUMBERS:\n• GMV: 32,195 EGP ↑ +0.5%\n• Orders: 17")) is True

    @pytest.mark.unit
    def test_chart(self):
        text = (
            "Top items:\n"
            "• Item A: 4 units = 2,600 EGP GMV\n"
            "• Item B: 3 units = 1,500 EGP GMV\n"
            "• Item C: 2 units = 800 EGP GMV"
        )
        assert has_visual_content(parse_response(text)) is True

    @pytest.mark.unit
    def test_plain_text(self):
        assert has_visual_content(parse_response("Just some regular text without any metrics or data.")) is False

    @pytest.mark.unit
    def test_field_presence(self):
        assert has_visual_content(ParsedResponse()) is False
        assert has_visual_content(ParsedResponse(insights=[])) is False
        assert has_visual_content(ParsedResponse(table_data=TableData(headers=["a"], rows=[["1"]]))) is True
        assert has_visual_content(None) is False


class TestWireFormat:

    @pytest.mark.unit
    def test_camel_case_and_omitted_fields(self, sentence_kpi_reply):
        data = parse_response(sentence_kpi_reply).to_dict()
        assert set(data) == {"kpiCards", "sections"}
        assert data["kpiCards"][1] == {"label": "Orders", "value": 17}
        assert data["sections"][0]["type"] == "kpis"
        assert data["sections"][0]["content"][0]["unit"] == "EGP"

    @pytest.mark.unit
    def test_menu_icons_and_colors(self):
        assert get_menu_eng_icon(MenuCategory.STAR) == "⭐"
        assert get_menu_eng_icon("plowhorse") == "🐴"
        assert get_menu_eng_icon("UNKNOWN") == "📊"
        assert get_menu_eng_color(MenuCategory.DOG) == "text-muted-foreground"
        assert get_menu_eng_color("nope") == "text-foreground"
