"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Ladder positions 0 (administrator) and 1 (entry grade) can never be promotion targets.
MIN_PROMOTION_TARGET_POSITION = 2

PERSONNEL_APPOINTMENT_FORM_KEY = "personnelappointment"

# Appointment payloads written by the approval UI use Korean labels for the change type.
SPECIAL_PROMOTION_LABELS = frozenset({"SPECIAL", "특별승진"})
REGULAR_PROMOTION_LABELS = frozenset({"REGULAR", "정기승진"})

MAX_FAILURE_REASON_LENGTH = 500
