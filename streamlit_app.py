"""Streamlit Web UI for the job market dashboard.

Pick qualification / sector / location tier / job role, run an AI market
analysis broken down by city tier, and download the result as CSV.
"""

from __future__ import annotations

import asyncio
import logging
import os

logger = logging.getLogger(__name__)

import nest_asyncio
import pandas as pd
import streamlit as st
from dotenv import load_dotenv

load_dotenv()
nest_asyncio.apply()

# Streamlit Cloud: sync st.secrets → os.environ so the LLM client can read it
if "ANTHROPIC_API_KEY" not in os.environ:
    try:
        os.environ["ANTHROPIC_API_KEY"] = st.secrets["ANTHROPIC_API_KEY"]
    except Exception:
        pass

from job_market.clients.llm_client import LLMClient
from job_market.config import load_config
from job_market.export.csv_exporter import export_filename
from job_market.logging.cost_calculator import calculate_cost
from job_market.models.filters import DIMENSIONS, filter_options
from job_market.models.report import MarketReport
from job_market.pipeline.report_fetcher import ReportFetcher
from job_market.pipeline.session import MarketSession, ViewState

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Job Market Dashboard",
    page_icon=":bar_chart:",
    layout="wide",
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_config():
    return load_config()


def _get_session() -> MarketSession:
    """Return the per-browser-session controller, creating it on first run."""
    if "market_session" not in st.session_state:
        config = _get_config()
        try:
            llm = LLMClient(timeout=config.llm.timeout, max_attempts=config.llm.max_attempts)
        except Exception as e:
            raise RuntimeError(f"LLM client init failed. Check ANTHROPIC_API_KEY: {e}") from e
        fetcher = ReportFetcher(
            llm,
            model=config.llm.model,
            max_tokens=config.llm.max_tokens,
            temperature=config.llm.temperature,
        )
        st.session_state["market_session"] = MarketSession(fetcher)
    return st.session_state["market_session"]


def _on_filter_change(dimension: str) -> None:
    _get_session().on_filter_change(dimension, st.session_state[f"filter_{dimension}"])


def _render_filter_bar(session: MarketSession) -> bool:
    """Render the filter row. Returns True when Analyze was clicked."""
    config = _get_config()
    cols = st.columns([1, 1, 1, 1.4, 0.6, 0.6], vertical_alignment="bottom")
    for col, (name, (_, label, _)) in zip(cols, DIMENSIONS.items()):
        options = filter_options(name)
        with col:
            st.selectbox(
                label,
                options,
                index=options.index(session.filters.label(name)),
                key=f"filter_{name}",
                on_change=_on_filter_change,
                args=(name,),
                disabled=session.is_loading,
            )
    with cols[4]:
        clicked = st.button(
            "Analyze",
            type="primary",
            disabled=session.is_loading,
            use_container_width=True,
        )
    with cols[5]:
        csv_text = session.export_csv()
        st.download_button(
            "CSV",
            data=(csv_text or "").encode("utf-8"),
            file_name=export_filename(session.filters, config.export.filename_prefix),
            mime=config.export.mime_type,
            disabled=csv_text is None or session.is_loading,
            use_container_width=True,
        )
    return clicked


def _render_charts(report: MarketReport) -> None:
    df = pd.DataFrame(
        {
            "Tier": [r.tier.value for r in report.tier_analyses],
            "Estimated openings": [r.estimated_openings for r in report.tier_analyses],
            "Min salary (LPA)": [r.salary_min_lpa for r in report.tier_analyses],
            "Max salary (LPA)": [r.salary_max_lpa for r in report.tier_analyses],
        }
    )
    left, right = st.columns(2)
    with left:
        st.subheader("Openings by tier")
        st.bar_chart(df, x="Tier", y="Estimated openings")
    with right:
        st.subheader("Salary range by tier")
        st.bar_chart(df, x="Tier", y=["Min salary (LPA)", "Max salary (LPA)"], stack=False)


def _render_report(report: MarketReport) -> None:
    if report.summary:
        st.info(report.summary)
    for row in report.tier_analyses:
        with st.container(border=True):
            st.markdown(f"### {row.tier.value}")
            m1, m2, m3 = st.columns(3)
            m1.metric("Demand", row.demand_level.value)
            m2.metric("Estimated openings", f"{row.estimated_openings:,}")
            m3.metric("Salary (LPA)", f"{row.salary_min_lpa:g} - {row.salary_max_lpa:g}")
            st.markdown(f"**Top cities:** {', '.join(row.top_cities) or '-'}")
            st.markdown(f"**Top employers:** {', '.join(row.top_employers) or '-'}")
            st.markdown(f"**In-demand skills:** {', '.join(row.in_demand_skills) or '-'}")
            st.markdown(f"**Growth outlook:** {row.growth_outlook}")
            st.markdown(f"**Key insight:** {row.key_insight}")


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

st.title("Job Market Dashboard")
st.caption("AI-powered entry-level hiring analysis across Indian city tiers")

try:
    session = _get_session()
except RuntimeError as e:
    st.error(str(e))
    st.stop()

if _render_filter_bar(session):
    with st.spinner("Analyzing live job market... This might take a moment."):
        try:
            asyncio.run(session.analyze())
        except Exception as exc:
            logger.error("Market analysis failed: %s", type(exc).__name__)
            st.error("An unexpected error occurred. Please try again.")
            st.stop()
    usage = session.fetcher.llm.get_token_summary()
    st.session_state["last_cost"] = calculate_cost(usage["calls"])
    # Rerun so the filter bar picks up the new CSV state
    st.rerun()

state = session.view_state
if state is ViewState.ERROR:
    st.error(session.error)
elif state is ViewState.REPORT:
    _render_charts(session.report)
    _render_report(session.report)
    if "last_cost" in st.session_state:
        st.caption(f"Estimated API cost: ${st.session_state['last_cost']:.4f}")
elif state is ViewState.NO_RESULTS:
    st.subheader("No Results Found")
    st.markdown(
        "The AI could not find a significant number of results for the selected "
        "filters. Please try a different combination."
    )
else:
    st.subheader("Welcome to the Job Dashboard")
    st.markdown(
        "Use the filters above to generate a strategic analysis of the job market by city tier."
    )
