"""
Configuration for the Grade 8 Analytics engine

Contains the subject list, the KJSEA grading scale and report settings.
To change the scale or the subject list, simply edit the values below.
"""

# =============================================================================
# SUBJECTS
# =============================================================================
# Column names expected in every uploaded CSV, in report order.

SUBJECTS = (
    "English",
    "Kiswahili",
    "Mathematics",
    "IntegratedScience",
    "SocialStudies",
    "ReligiousEducation",
    "CreativeArtsAndSports",
    "PreTechnicalStudies",
    "AgricultureAndNutrition",
)

SUBJECT_LABELS = {
    "English": "English",
    "Kiswahili": "Kiswahili",
    "Mathematics": "Mathematics",
    "IntegratedScience": "Integrated Science",
    "SocialStudies": "Social Studies",
    "ReligiousEducation": "Religious Education",
    "CreativeArtsAndSports": "Creative Arts & Sports",
    "PreTechnicalStudies": "Pre-Technical Studies",
    "AgricultureAndNutrition": "Agriculture & Nutrition",
}

IDENTITY_FIELDS = ("StudentID", "Name", "Gender", "Stream")

GENDERS = ("M", "F")

# =============================================================================
# GRADING SCALE (KJSEA)
# =============================================================================
# (minimum score, label, points), highest band first.
# EE1 (AL 8): 90-100   EE2 (AL 7): 75-89   ME1 (AL 6): 58-74   ME2 (AL 5): 41-57
# AE1 (AL 4): 31-40    AE2 (AL 3): 21-30   BE1 (AL 2): 11-20   BE2 (AL 1): 0-10

GRADE_BANDS = (
    (90, "EE1", 8),
    (75, "EE2", 7),
    (58, "ME1", 6),
    (41, "ME2", 5),
    (31, "AE1", 4),
    (21, "AE2", 3),
    (11, "BE1", 2),
    (None, "BE2", 1),  # Floor band: everything below 11
)

GRADE_REMARKS = {
    "EE1": "Exceptional",
    "EE2": "Very Good",
    "ME1": "Good",
    "ME2": "Fair",
    "AE1": "Needs Improvement",
    "AE2": "Below Average",
    "BE1": "Well Below Average",
    "BE2": "Minimal",
}

PASS_MARK = 41  # ME2 is the lowest "Meeting Expectation" band

# =============================================================================
# REPORT SETTINGS
# =============================================================================

TOP_N = 10                 # Size of the top / bottom lists
REMEDIATION_THRESHOLD = 2  # Failed subjects that put a student on the watch-list

DERIVED_FIELDS = (
    "Average",
    "TotalMarks",
    "TotalPoints",
    "FailedSubjects",
    "OverallGrade",
    "Position",
)

# =============================================================================
# DASHBOARD DISPLAY SETTINGS
# =============================================================================

GRADE_COLORS = {
    "EE1": "#1b5e20",   # Dark green
    "EE2": "#43a047",   # Green
    "ME1": "#1976d2",   # Blue
    "ME2": "#64b5f6",   # Light blue
    "AE1": "#ffb300",   # Amber
    "AE2": "#f57c00",   # Orange
    "BE1": "#e53935",   # Red
    "BE2": "#8e0000",   # Dark red
}

# =============================================================================
# MOCK COHORT
# =============================================================================

DEFAULT_STREAM = "8 Suswa"
MOCK_ID_PREFIX = "MUGUMO"
MOCK_ID_START = 2026001

MOCK_CLASS_LIST = (
    "Adrian Nga'nga", "Agnes Wangui", "Alex Mwaura", "Angela Njeri", "Beatrice Nyambura",
    "Blessed Njoki", "Brassel Irungu", "Brian Muiruri", "Brendon Oteyo", "Cindy Njoki",
    "Daniel Kiarie", "David Ndegwa", "Dennis Kimeu", "Edwin Karanja", "Elizabeth Muthoni",
    "Emmanuel Bongera", "Emmanuel Karita", "Esther Nyambura", "Hope Nasimiyu", "Humphrey Njuguna",
    "Israel Jomo", "Jeff Mwangi", "Joan Nyambura", "Josphat Kariuki", "Julius Ikui",
    "Kelvin Mwangi", "Kelvin Ombongi", "Lewis Miring'u", "Lincon Okello", "Martin Ngarari",
    "Mary Wangui", "Michelle Wanjiku", "Melody Njoki", "Miriam Sarange", "Noel Vivian",
    "Oliva Nkatha", "Peter Ndungu", "Precious Njeri", "Precious Wanjiku", "Princess Wanjiru",
    "Ramadhan Ismael", "Ronny Ndungu", "Ryan Junior", "Ryan Kariuki", "Ryan Ngunjiri",
    "Sarah Wangari", "Shalon Ndunge", "Shantel Wairimu", "Subrina Waithiegeni", "Samuel Makau",
    "Yakub Huka", "Zuleikha Adan",
)

# Used only to guess a gender for mock students
FEMALE_FIRST_NAMES = frozenset({
    "agnes", "angela", "beatrice", "blessed", "cindy", "elizabeth", "esther",
    "hope", "joan", "mary", "michelle", "melody", "miriam", "noel", "oliva",
    "precious", "princess", "sarah", "shalon", "shantel", "subrina",
    "zuleikha", "wairimu", "wangui", "njeri", "nyambura", "njoki", "muthoni",
    "wangari", "ndunge", "waithiegeni",
})
