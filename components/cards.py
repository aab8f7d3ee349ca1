"""
Read-only cards for the remote results: analysis report, coaching guide,
simulation summary and knowledge-base documents.
"""
from __future__ import annotations

from typing import Callable, Optional

import streamlit as st

from domain.models import KnowledgeInsight
from domain.reports import AnalysisReport, SimulationResult, TutorialGuide, outcome_shares, power_shares


def report_card(report: AnalysisReport) -> None:
    intel = report.opponentIntel
    plan = report.tacticalBattlePlan
    st.markdown("<div class='recommendation-card'>", unsafe_allow_html=True)

    c1, c2, c3 = st.columns([2, 2, 2])
    with c1:
        st.subheader("Formation")
        st.markdown(f"**{plan.recommendedFormation or '-'}**")
    with c2:
        st.subheader("Win chance")
        st.markdown(f"**{plan.winProbability:.0f}%**")
    with c3:
        st.subheader("Threat level")
        st.markdown(f"**{intel.threatLevel:g}/10**")
    if plan.rationale:
        st.info(plan.rationale)

    st.subheader("Opponent Intel")
    if intel.keyWeakness:
        st.caption(f"Key weakness: {intel.keyWeakness}")
    st.write(intel.analysis)

    st.subheader("Tactics")
    settings = plan.settings
    st.table(
        {
            "Setting": ["Style", "Passing", "Pressing", "Aggression", "Offside trap", "Marking", "Tempo", "Focus"],
            "Value": [
                settings.style,
                settings.passing,
                settings.pressing,
                settings.aggression,
                "On" if settings.offsideTrap else "Off",
                settings.marking,
                settings.tempo,
                settings.focus,
            ],
        }
    )
    lines = plan.lineTactics
    l1, l2, l3 = st.columns(3)
    l1.metric("Forwards", lines.forwards or "-")
    l2.metric("Midfielders", lines.midfielders or "-")
    l3.metric("Defenders", lines.defenders or "-")

    gm = report.gameManagement
    st.subheader("Game Management")
    st.write(f"**Substitutions:** {gm.substitutionStrategy}")
    st.write(f"**Change formation when:** {gm.formationChangeTriggers}")
    for threat in gm.criticalThreats:
        st.write(f"- {threat}")

    st.subheader("Prediction")
    st.write(f"Most likely score: **{report.prediction.mostLikelyScore or '-'}**")
    if report.prediction.keyToVictory:
        st.success(report.prediction.keyToVictory)

    st.markdown("</div>", unsafe_allow_html=True)


def tutorial_view(guide: TutorialGuide) -> None:
    st.subheader("1. Formation")
    for i, step in enumerate(guide.formationSteps, start=1):
        st.write(f"{i}. {step}")
    if guide.formationVisualCheck:
        st.caption(f"Check: {guide.formationVisualCheck}")

    st.subheader("2. Settings")
    for step in guide.settingsSteps:
        with st.expander(step.title or step.location or "Step"):
            st.write(step.instruction)
            if step.location:
                st.caption(f"Where: {step.location}")
            if step.reason:
                st.caption(f"Why: {step.reason}")

    if guide.substitutionPlan:
        st.subheader("3. Substitutions")
        for sub in guide.substitutionPlan:
            st.write(f"- **{sub.scenario}**: {sub.action}")

    if guide.commonMistakes:
        st.subheader("Common mistakes")
        for item in guide.commonMistakes:
            st.warning(f"{item.mistake}\n\nFix: {item.fix}")

    if guide.coachEncouragement:
        st.success(guide.coachEncouragement)


def simulation_summary(result: SimulationResult) -> None:
    win, draw, loss = outcome_shares(result.prediction)
    c1, c2, c3 = st.columns(3)
    c1.metric("Win", f"{win:.0f}%")
    c2.metric("Draw", f"{draw:.0f}%")
    c3.metric("Loss", f"{loss:.0f}%")

    coherence = result.coherence
    st.caption(f"Tactical coherence: {coherence.overall:.0f}/100")
    st.progress(min(max(coherence.overall / 100, 0.0), 1.0))
    if coherence.feedback:
        st.write(coherence.feedback)

    mine, theirs = power_shares(result.strengthAnalysis)
    st.caption(f"Power balance: {mine:.0f}% vs {theirs:.0f}%")
    if result.strengthAnalysis.contextModifier:
        st.caption(result.strengthAnalysis.contextModifier)

    if result.scenarios:
        st.table(
            {
                "Scenario": [s.name for s in result.scenarios],
                "Win %": [f"{s.winChance:.0f}" for s in result.scenarios],
                "Coherence": [f"{s.coherence:.0f}" for s in result.scenarios],
                "Impact": [s.impact for s in result.scenarios],
            }
        )


def insight_card(insight: KnowledgeInsight, on_remove: Optional[Callable[[str], None]] = None) -> None:
    with st.expander(f"{insight.filename} ({insight.documentType or 'Document'})"):
        if insight.keyInsights:
            st.markdown("**Key insights**")
            for item in insight.keyInsights:
                st.write(f"- {item}")
        if insight.tacticalRules:
            st.markdown("**Tactical rules**")
            for item in insight.tacticalRules:
                st.write(f"- {item}")
        st.caption(f"Added {insight.createdAt:%Y-%m-%d %H:%M} UTC")
        if on_remove is not None and st.button("Remove", key=f"rm_{insight.id}"):
            on_remove(insight.id)
            st.rerun()
