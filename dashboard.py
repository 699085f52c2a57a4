"""
Grade 8 Performance Dashboard - CSV Edition

Interactive Streamlit dashboard over the analytics engine.
Upload a score sheet (or use the demo cohort) to get rankings, KJSEA grades,
subject analysis, report cards and the remediation list.

Features:
- Cohort overview: gender, streams, subject means and grade distribution
- Subject analysis with per-grade histograms
- Full rankings with CSV download
- Remediation list (2+ subjects below the pass mark)
- Per-student report card with remarks
"""

import io

import streamlit as st
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd

from analytics import AnalyticsResult, ProcessedStudent, build_report_card, process_data
from config import GRADE_COLORS, PASS_MARK, SUBJECT_LABELS, SUBJECTS, TOP_N
from grading import grade, grade_thresholds, remark
from load_data import export_to_csv, generate_mock_data, parse_scores_csv

# Page configuration
st.set_page_config(
    page_title="Grade 8 Performance Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .grade-badge {
        padding: 4px 12px;
        border-radius: 20px;
        font-size: 0.85em;
        font-weight: 500;
        color: white;
    }
    .primary-metric {
        background-color: #e3f2fd;
        border-left: 4px solid #1976d2;
        padding: 10px;
        margin: 5px 0;
    }
</style>
""", unsafe_allow_html=True)


# ==================== DATA LOADING ====================

@st.cache_data
def load_records(file_bytes: bytes = None, seed: int = None) -> list:
    """Raw records from an uploaded sheet, or a demo cohort when no file is given (cached)."""
    if file_bytes is not None:
        return parse_scores_csv(io.BytesIO(file_bytes))
    return generate_mock_data(seed=seed)


# ==================== HELPER FUNCTIONS ====================

def subject_label(subject: str) -> str:
    return SUBJECT_LABELS.get(subject, subject)


def students_table(students: list) -> pd.DataFrame:
    """Ranking-style table for a list of processed students."""
    rows = []
    for s in students:
        rows.append({
            'Position': s.position,
            'ID': s.student_id,
            'Name': s.name,
            'Stream': s.stream,
            'Total': s.total_marks,
            'Average': f"{s.average:.2f}",
            'Points': s.total_points,
            'Grade': s.overall_grade,
            'Failed': s.failed_subjects,
        })
    return pd.DataFrame(rows)


def failed_subjects_text(student: ProcessedStudent) -> str:
    """Comma-separated list of the subjects a student scored below the pass mark in."""
    return ', '.join(
        f"{subject_label(subj)} ({score})"
        for subj, score in student.scores.items()
        if score < PASS_MARK
    )


# ==================== CHART FUNCTIONS ====================

def create_subject_mean_chart(result: AnalyticsResult) -> go.Figure:
    """Horizontal bar chart of subject means (best subject on top)."""
    stats = list(reversed(result.subject_stats))
    means = [s.mean for s in stats]
    colors = [GRADE_COLORS[grade(m)] for m in means]

    fig = go.Figure(go.Bar(
        x=means,
        y=[subject_label(s.name) for s in stats],
        orientation='h',
        marker_color=colors,
        text=[f"{m:.2f}" for m in means],
        textposition='outside'
    ))

    fig.add_vline(
        x=PASS_MARK,
        line_dash="dash",
        line_color="#dc3545",
        annotation_text=f"Pass mark: {PASS_MARK}",
        annotation_position="top"
    )

    fig.update_layout(
        title="Subject Means (Top to Bottom)",
        xaxis_title="Mean Score",
        xaxis=dict(range=[0, 105]),
        height=max(300, len(stats) * 45),
        margin=dict(l=200)
    )

    return fig


def create_grade_distribution_chart(result: AnalyticsResult) -> go.Figure:
    """Stacked bar chart: grade counts per subject."""
    labels = [t['label'] for t in grade_thresholds()]
    subjects = [subject_label(s.name) for s in result.subject_stats]

    fig = go.Figure()
    for label in labels:
        fig.add_trace(go.Bar(
            name=label,
            x=subjects,
            y=[s.grade_distribution[label] for s in result.subject_stats],
            marker_color=GRADE_COLORS[label]
        ))

    fig.update_layout(
        barmode='stack',
        title="Grade Distribution by Subject",
        yaxis_title="Students",
        xaxis_tickangle=-30,
        height=450
    )

    return fig


def create_gender_chart(result: AnalyticsResult) -> go.Figure:
    """Pie chart of the gender split."""
    dist = result.gender_distribution
    fig = px.pie(
        names=['Male', 'Female'],
        values=[dist['M'], dist['F']],
        color_discrete_sequence=['#1976d2', '#e91e63'],
        hole=0.4
    )
    fig.update_layout(title="Gender Distribution", height=350)
    return fig


def create_stream_chart(result: AnalyticsResult) -> go.Figure:
    """Bar chart of mean score per stream."""
    streams = list(result.stream_stats)
    means = [result.stream_stats[s]['mean'] for s in streams]
    counts = [result.stream_stats[s]['count'] for s in streams]

    fig = go.Figure(go.Bar(
        x=streams,
        y=means,
        marker_color='#388e3c',
        text=[f"{m:.2f} (n={c})" for m, c in zip(means, counts)],
        textposition='outside'
    ))
    fig.update_layout(
        title="Stream Means",
        yaxis_title="Mean Score",
        yaxis=dict(range=[0, 105]),
        height=350
    )
    return fig


def create_student_radar(student: ProcessedStudent, result: AnalyticsResult) -> go.Figure:
    """Radar chart of a student's scores against the cohort subject means."""
    subjects = list(SUBJECTS)
    labels = [subject_label(s) for s in subjects]
    means_by_subject = {s.name: s.mean for s in result.subject_stats}
    scores = [student.scores[s] for s in subjects]
    means = [means_by_subject[s] for s in subjects]

    fig = go.Figure()

    fig.add_trace(go.Scatterpolar(
        r=scores + [scores[0]],
        theta=labels + [labels[0]],
        fill='toself',
        name=student.name,
        line_color='#1976d2',
        fillcolor='rgba(25, 118, 210, 0.3)'
    ))

    fig.add_trace(go.Scatterpolar(
        r=means + [means[0]],
        theta=labels + [labels[0]],
        name='Class Mean',
        line_color='#ff9800',
        line_dash='dash',
        line_width=2
    ))

    fig.update_layout(
        polar=dict(radialaxis=dict(visible=True, range=[0, 100])),
        showlegend=True,
        title=f"Performance Comparison: {student.name}",
        height=450
    )

    return fig


# ==================== MAIN DASHBOARD ====================

def main():
    st.sidebar.title("Data Source")
    uploaded = st.sidebar.file_uploader("Upload Grade 8 CSV", type=["csv"])
    seed = None
    if uploaded is None:
        st.sidebar.caption("No file uploaded - showing a demo cohort.")
        seed = st.sidebar.number_input("Demo seed", min_value=0, value=2026, step=1)

    try:
        result = process_data(load_records(uploaded.getvalue() if uploaded else None, seed=seed))
    except ValueError as e:
        # Covers MalformedRecord / EmptyBatch from the engine and bad CSV layouts
        st.title("Grade 8 Performance Dashboard")
        st.error(f"Could not process the file: {e}")
        st.info("Fix the sheet and upload it again.")
        return

    st.title("Grade 8 Performance Dashboard")
    st.markdown(f"**{result.total_students} students** | Streams: {', '.join(result.stream_stats)}")

    st.sidebar.markdown("---")
    st.sidebar.title("Navigation")
    tab_selection = st.sidebar.radio(
        "Select View:",
        ["Cohort Overview", "Subject Analysis", "Rankings", "Remediation", "Report Card"]
    )

    st.sidebar.download_button(
        "Download processed CSV",
        data=export_to_csv(result),
        file_name="grade8_summary.csv",
        mime="text/csv"
    )

    # ==================== TAB 1: COHORT OVERVIEW ====================
    if tab_selection == "Cohort Overview":
        st.header("Cohort Overview")

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Total Students", result.total_students)
        with col2:
            st.metric("Overall Mean", f"{result.overall_mean:.2f}")
            st.caption(f"Grade: {grade(result.overall_mean)}")
        with col3:
            best = result.subject_stats[0]
            st.metric("Best Subject", subject_label(best.name), f"{best.mean:.2f}")
        with col4:
            st.metric("Needing Remediation", len(result.students_failing_2plus))

        st.divider()

        st.plotly_chart(create_subject_mean_chart(result), use_container_width=True)

        col1, col2 = st.columns(2)
        with col1:
            st.plotly_chart(create_gender_chart(result), use_container_width=True)
        with col2:
            st.plotly_chart(create_stream_chart(result), use_container_width=True)

        col1, col2 = st.columns(2)
        with col1:
            st.subheader(f"Top {TOP_N}")
            st.dataframe(students_table(result.top10), use_container_width=True, hide_index=True)
        with col2:
            st.subheader(f"Bottom {TOP_N}")
            st.dataframe(students_table(result.bottom10), use_container_width=True, hide_index=True)

    # ==================== TAB 2: SUBJECT ANALYSIS ====================
    elif tab_selection == "Subject Analysis":
        st.header("Subject Analysis")

        st.plotly_chart(create_grade_distribution_chart(result), use_container_width=True)

        rows = []
        for s in result.subject_stats:
            row = {
                'Subject': subject_label(s.name),
                'Mean': f"{s.mean:.2f}",
                'Pass Rate': f"{s.pass_rate:.1f}%",
                'Min': s.min,
                'Max': s.max,
            }
            row.update(s.grade_distribution)
            rows.append(row)
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

        st.subheader("Grading Scale")
        scale_rows = [
            {
                'Grade': t['label'],
                'Range': f"{t['min'] if t['min'] is not None else 0}-"
                         f"{t['max'] - 1 if t['max'] is not None else 100}",
                'Points': t['points'],
                'Remark': t['remark']
            }
            for t in grade_thresholds()
        ]
        st.dataframe(pd.DataFrame(scale_rows), use_container_width=True, hide_index=True)

    # ==================== TAB 3: RANKINGS ====================
    elif tab_selection == "Rankings":
        st.header("Student Rankings")

        streams = ["All"] + list(result.stream_stats)
        selected_stream = st.selectbox("Stream", streams)
        students = result.processed_data
        if selected_stream != "All":
            students = [s for s in students if s.stream == selected_stream]

        table = students_table(students)
        for subj in SUBJECTS:
            table[subject_label(subj)] = [s.scores[subj] for s in students]
        st.dataframe(table, use_container_width=True, hide_index=True)

    # ==================== TAB 4: REMEDIATION ====================
    elif tab_selection == "Remediation":
        st.header(f"Remediation List (Below {PASS_MARK} in 2+ Subjects)")

        if result.students_failing_2plus:
            rows = [
                {
                    'Position': s.position,
                    'Name': s.name,
                    'Stream': s.stream,
                    'Average': f"{s.average:.2f}",
                    'Failed': s.failed_subjects,
                    'Subjects Below Pass Mark': failed_subjects_text(s)
                }
                for s in result.students_failing_2plus
            ]
            st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
        else:
            st.success("No students currently need remediation.")

    # ==================== TAB 5: REPORT CARD ====================
    elif tab_selection == "Report Card":
        st.header("Student Report Card")

        options = {f"{s.position}. {s.name} ({s.student_id})": s for s in result.processed_data}
        selected = st.selectbox("Select Student", list(options))
        student = options[selected]

        col1, col2, col3, col4 = st.columns(4)
        with col1:
            st.metric("Position", f"{student.position} / {result.total_students}")
        with col2:
            st.metric("Average", f"{student.average:.2f}",
                      f"{student.average - result.overall_mean:+.2f} vs class")
        with col3:
            st.metric("Total Marks", student.total_marks)
        with col4:
            st.metric("Total Points", student.total_points)

        grade_color = GRADE_COLORS.get(student.overall_grade, '#666')
        st.markdown(
            f"Overall grade: <span class='grade-badge' style='background-color: {grade_color};'>"
            f"{student.overall_grade}</span> {remark(student.overall_grade)}",
            unsafe_allow_html=True
        )

        card = pd.DataFrame(build_report_card(student))
        card['Subject'] = card['Subject'].map(subject_label)
        st.dataframe(card, use_container_width=True, hide_index=True)

        st.plotly_chart(create_student_radar(student, result), use_container_width=True)


if __name__ == "__main__":
    main()
