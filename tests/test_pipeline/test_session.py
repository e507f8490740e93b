"""Tests for the dashboard session controller."""

import asyncio
import csv
import io

import pytest

from job_market.errors import NetworkError, ReportError, SchemaViolation
from job_market.models.filters import Filters, LocationTier, Qualification, Sector
from job_market.pipeline.report_fetcher import ReportFetcher
from job_market.pipeline.session import MarketSession, ViewState


@pytest.fixture
def session(mock_llm_client):
    return MarketSession(ReportFetcher(mock_llm_client))


class TestInitialState:
    def test_welcome(self, session):
        assert session.view_state is ViewState.WELCOME
        assert session.report is None
        assert session.error is None
        assert not session.has_searched
        assert not session.is_data_available
        assert session.export_csv() is None

    def test_filters_default_unconstrained(self, session):
        assert session.filters == Filters()


class TestFilterChange:
    def test_on_filter_change(self, session):
        session.on_filter_change("qualification", "BCom")
        session.on_filter_change("location", "Tier 3")
        assert session.filters.qualification is Qualification.BCOM
        assert session.filters.location is LocationTier.TIER_3

    def test_invalid_value_rejected(self, session):
        with pytest.raises(ValueError):
            session.on_filter_change("sector", "Agriculture")

    def test_ignored_while_loading(self, session):
        session.is_loading = True
        session.on_filter_change("sector", "IT")
        assert session.filters.sector is None


class TestAnalyze:
    @pytest.mark.asyncio
    async def test_end_to_end(self, session, mock_llm_client, response_factory, tier1_row, tier3_row):
        session.on_filter_change("qualification", "BSC")
        session.on_filter_change("sector", "IT")
        session.on_filter_change("location", "All Tiers")
        session.on_filter_change("job_role", "All Roles")
        mock_llm_client.generate.return_value = response_factory(
            {"tier_analyses": [tier1_row, tier3_row]}
        )

        report = await session.analyze()

        prompt = mock_llm_client.generate.call_args.kwargs["prompt"]
        assert "- Qualification: BSC" in prompt
        assert "- Sector: IT" in prompt
        assert "- Location Tier:" not in prompt
        assert "- Job Role:" not in prompt

        assert mock_llm_client.generate.await_count == 1
        assert report is session.report
        assert len(report.tier_analyses) == 2
        assert [r.tier for r in report.tier_analyses] == [LocationTier.TIER_1, LocationTier.TIER_3]
        assert session.view_state is ViewState.REPORT
        assert session.is_data_available

        content = session.export_csv()
        assert len(content.splitlines()) == 3
        rows = list(csv.reader(io.StringIO(content)))
        assert [r[0] for r in rows[1:]] == ["Tier 1 (Metros)", "Tier 3"]

    @pytest.mark.asyncio
    async def test_empty_result_is_no_results_state(self, session, mock_llm_client, response_factory):
        mock_llm_client.generate.return_value = response_factory({"tier_analyses": []})
        report = await session.analyze()

        assert report is not None and report.is_empty
        assert session.error is None
        assert session.view_state is ViewState.NO_RESULTS
        assert not session.is_data_available
        assert session.export_csv() is None

    @pytest.mark.asyncio
    async def test_error_stored_and_report_cleared(
        self, session, mock_llm_client, response_factory, tier1_row
    ):
        mock_llm_client.generate.return_value = response_factory({"tier_analyses": [tier1_row]})
        await session.analyze()
        assert session.view_state is ViewState.REPORT

        mock_llm_client.generate.side_effect = NetworkError()
        result = await session.analyze()

        assert result is None
        assert session.report is None
        assert session.error == NetworkError.default_message
        assert session.view_state is ViewState.ERROR
        assert session.export_csv() is None

    @pytest.mark.asyncio
    async def test_schema_violation_message_shown(self, session, mock_llm_client, response_factory):
        mock_llm_client.generate.return_value = response_factory("not json at all")
        await session.analyze()
        assert session.view_state is ViewState.ERROR
        assert "not json" not in session.error

    @pytest.mark.asyncio
    async def test_unexpected_error_sets_error_and_propagates(self, session, mock_llm_client):
        mock_llm_client.generate.side_effect = KeyError("bug")
        with pytest.raises(KeyError):
            await session.analyze()

        assert not session.is_loading
        assert session.report is None
        assert session.error == ReportError.default_message
        assert session.view_state is ViewState.ERROR

    @pytest.mark.asyncio
    async def test_success_clears_previous_error(
        self, session, mock_llm_client, response_factory, tier1_row
    ):
        mock_llm_client.generate.return_value = response_factory("garbage")
        await session.analyze()
        assert session.error is not None

        mock_llm_client.generate.return_value = response_factory({"tier_analyses": [tier1_row]})
        await session.analyze()
        assert session.error is None
        assert session.view_state is ViewState.REPORT

    @pytest.mark.asyncio
    async def test_one_request_per_analyze(self, session, mock_llm_client):
        for _ in range(3):
            await session.analyze()
        assert mock_llm_client.generate.await_count == 3

    @pytest.mark.asyncio
    async def test_loading_state_during_fetch(self, session, mock_llm_client, response_factory):
        observed = []

        async def _generate(**kwargs):
            observed.append(session.view_state)
            return response_factory({"tier_analyses": []})

        mock_llm_client.generate.side_effect = _generate
        await session.analyze()
        assert observed == [ViewState.LOADING]
        assert not session.is_loading

    @pytest.mark.asyncio
    async def test_overlapping_analyze_rejected(self, session, mock_llm_client, response_factory):
        release = asyncio.Event()

        async def _generate(**kwargs):
            await release.wait()
            return response_factory({"tier_analyses": []})

        mock_llm_client.generate.side_effect = _generate
        first = asyncio.create_task(session.analyze())
        await asyncio.sleep(0)

        with pytest.raises(RuntimeError, match="already in progress"):
            await session.analyze()

        release.set()
        await first
        assert mock_llm_client.generate.await_count == 1
        assert session.view_state is ViewState.NO_RESULTS

    @pytest.mark.asyncio
    async def test_superseded_response_discarded(
        self, session, mock_llm_client, response_factory, tier_factory
    ):
        release_first = asyncio.Event()
        calls = 0

        async def _generate(**kwargs):
            nonlocal calls
            calls += 1
            if calls == 1:
                await release_first.wait()
                return response_factory({"tier_analyses": [tier_factory("Tier 4")]})
            return response_factory({"tier_analyses": [tier_factory("Tier 2")]})

        mock_llm_client.generate.side_effect = _generate
        first = asyncio.create_task(session.analyze())
        await asyncio.sleep(0)

        # Simulate a host that let a second request through anyway
        session.is_loading = False
        await session.analyze()
        release_first.set()
        stale = await first

        assert stale is None
        assert [r.tier for r in session.report.tier_analyses] == [LocationTier.TIER_2]


class TestExport:
    def test_export_uses_current_report(self, session, sample_report):
        session.report = sample_report
        content = session.export_csv()
        assert len(content.splitlines()) == len(sample_report.tier_analyses) + 1

    def test_schema_violation_is_value_error(self):
        assert issubclass(SchemaViolation, ValueError)

    def test_filters_kept_across_analyses(self, session):
        session.on_filter_change("sector", Sector.LOGISTICS)
        assert session.filters.sector is Sector.LOGISTICS
