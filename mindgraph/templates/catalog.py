"""
Built-in Template Catalog
=========================

Declarative board templates: one root topic, a handful of sections,
four leaf topics per section. Keyed by slug.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class TemplateSection:
    title: str
    children: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TemplateSpec:
    """Root label plus sections; expanded by TemplateInstantiator."""
    key: str
    name: str
    root: str
    sections: Tuple[TemplateSection, ...] = ()

    def __post_init__(self):
        if not self.key:
            raise ValueError("Template key must be non-empty")

    @property
    def node_count(self) -> int:
        return 1 + len(self.sections) + sum(len(s.children) for s in self.sections)


def _spec(key: str, name: str, root: str, *sections: Tuple[str, Tuple[str, ...]]) -> TemplateSpec:
    return TemplateSpec(
        key=key,
        name=name,
        root=root,
        sections=tuple(TemplateSection(title, tuple(children)) for title, children in sections),
    )


BUILTIN_TEMPLATES: Tuple[TemplateSpec, ...] = (
    _spec(
        "school-organized", "Academic Hub", "Academic Success",
        ("📚 Courses", ("Current Semester", "Prerequisites", "Electives", "Study Materials")),
        ("📝 Assignments", ("Weekly Tasks", "Term Papers", "Group Projects", "Lab Reports")),
        ("📅 Schedule", ("Class Timetable", "Study Blocks", "Office Hours", "Deadlines")),
        ("🎯 Goals", ("Grade Targets", "Skill Development", "Extracurriculars", "Career Prep")),
        ("📖 Resources", ("Textbooks", "Online Libraries", "Study Groups", "Tutoring")),
    ),
    _spec(
        "business-structured", "Business Framework", "Business Strategy",
        ("🎯 Vision & Mission", ("Core Values", "Strategic Goals", "Brand Identity", "Market Position")),
        ("📊 Operations", ("Process Mapping", "Quality Control", "Supply Chain", "Risk Management")),
        ("💰 Finance", ("Budget Planning", "Revenue Streams", "Cost Analysis", "Investment Strategy")),
        ("👥 Team", ("Organizational Chart", "Skill Gaps", "Training Programs", "Culture Building")),
        ("📈 Growth", ("Market Expansion", "Product Development", "Partnerships", "Competitive Analysis")),
    ),
    _spec(
        "project-management", "Project Hub", "Project Management",
        ("📋 Planning", ("Scope Definition", "Requirements", "Timeline", "Milestones")),
        ("👥 Team", ("Roles & Responsibilities", "Communication Plan", "Stakeholder Map", "Resource Allocation")),
        ("⚡ Execution", ("Task Breakdown", "Dependencies", "Progress Tracking", "Quality Assurance")),
        ("📊 Monitoring", ("Status Reports", "Risk Register", "Budget Tracking", "Performance Metrics")),
        ("🔄 Review", ("Lessons Learned", "Retrospectives", "Success Metrics", "Next Steps")),
    ),
    _spec(
        "knowledge-base", "Knowledge Hub", "Knowledge Management",
        ("📚 Learning", ("Topics of Interest", "Books to Read", "Courses", "Skill Development")),
        ("💡 Ideas", ("Brainstorming", "Innovation Pipeline", "Problem Solving", "Creative Projects")),
        ("🔗 Connections", ("Related Concepts", "Cross-references", "Applications", "Implications")),
        ("📝 Notes", ("Meeting Notes", "Research Findings", "Personal Insights", "Quick References")),
        ("🌟 Insights", ("Key Takeaways", "Best Practices", "Lessons Learned", "Action Items")),
    ),
    _spec(
        "personal-productivity", "Life Organization", "Personal Productivity",
        ("🎯 Goals", ("Short-term Goals", "Long-term Vision", "Quarterly Objectives", "Personal Mission")),
        ("📅 Time Management", ("Daily Routines", "Weekly Planning", "Time Blocking", "Priority Matrix")),
        ("🏠 Life Areas", ("Health & Fitness", "Relationships", "Career", "Personal Growth")),
        ("💼 Work-Life", ("Professional Development", "Work Projects", "Skill Building", "Network Building")),
        ("🎨 Hobbies", ("Creative Projects", "Learning Activities", "Travel Plans", "Personal Interests")),
    ),
    _spec(
        "decision-tree", "Decision Framework", "Decision Making",
        ("🔍 Analysis", ("Problem Statement", "Gather Information", "Identify Options", "Evaluate Criteria")),
        ("⚖️ Evaluation", ("Pros & Cons", "Risk Assessment", "Impact Analysis", "Stakeholder Views")),
        ("✅ Decision", ("Recommended Choice", "Rationale", "Implementation Plan", "Contingency Plans")),
        ("📊 Monitoring", ("Success Metrics", "Progress Tracking", "Review Points", "Adjustment Triggers")),
    ),
    _spec(
        "timeline", "Timeline Planning", "Timeline Management",
        ("🎯 Goals", ("Vision Statement", "Long-term Objectives", "Success Criteria", "Milestone Definition")),
        ("📅 Phases", ("Planning Phase", "Execution Phase", "Monitoring Phase", "Completion Phase")),
        ("⏰ Milestones", ("Key Deliverables", "Review Points", "Decision Gates", "Celebration Points")),
        ("📈 Progress", ("Weekly Check-ins", "Monthly Reviews", "Quarterly Assessments", "Annual Planning")),
    ),
    _spec(
        "swot-analysis", "SWOT Analysis", "Strategic Analysis",
        ("💪 Strengths", ("Core Competencies", "Unique Advantages", "Internal Resources", "Market Position")),
        ("🔍 Weaknesses", ("Areas for Improvement", "Resource Gaps", "Process Issues", "Competitive Disadvantages")),
        ("🚀 Opportunities", ("Market Trends", "Partnership Potential", "Technology Advances", "Expansion Possibilities")),
        ("⚠️ Threats", ("Competitive Risks", "Market Changes", "Regulatory Issues", "Economic Factors")),
    ),
    _spec(
        "mind-map-starter", "Mind Map Starter", "Central Topic",
        ("🌟 Key Concepts", ("Main Ideas", "Core Principles", "Important Facts", "Key Questions")),
        ("🔗 Connections", ("Related Topics", "Associated Ideas", "Cross-references", "Applications")),
        ("📝 Details", ("Supporting Information", "Examples", "Evidence", "Explanations")),
        ("🤔 Reflections", ("Personal Thoughts", "Questions to Explore", "Areas for Research", "Action Items")),
    ),
    _spec(
        "goal-planning", "Goal Achievement", "Goal Setting",
        ("🎯 Vision", ("Long-term Goals", "Life Vision", "Ultimate Objectives", "Dream Outcomes")),
        ("📋 Strategy", ("Action Plans", "Resource Requirements", "Timeline Planning", "Milestone Setting")),
        ("💪 Motivation", ("Why Important", "Personal Drivers", "Inspiration Sources", "Accountability Partners")),
        ("📊 Tracking", ("Progress Metrics", "Check-in Schedule", "Adjustment Points", "Success Indicators")),
    ),
)


class TemplateCatalog:
    """Lookup over template specs by key, in registration order."""

    def __init__(self, specs: Tuple[TemplateSpec, ...] = BUILTIN_TEMPLATES):
        self._specs: Dict[str, TemplateSpec] = {}
        for spec in specs:
            if spec.key in self._specs:
                raise ValueError(f"Duplicate template key: {spec.key}")
            self._specs[spec.key] = spec

    def get(self, key: str) -> Optional[TemplateSpec]:
        return self._specs.get(key)

    def keys(self) -> Tuple[str, ...]:
        return tuple(self._specs)

    def __contains__(self, key: str) -> bool:
        return key in self._specs

    def __len__(self) -> int:
        return len(self._specs)
