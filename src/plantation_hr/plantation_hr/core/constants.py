"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from calendar import SUNDAY

DEFAULT_REST_WEEKDAY = SUNDAY
DEFAULT_PROBATION_MONTHS = 3
DEFAULT_LIST_LIMIT = 500

HOLIDAY_NOTE_PREFIX = "Libur"

# Permission module names (role_permissions.module_name)
MODULE_LEAVE = "leave_management"
MODULE_TRANSFER = "employee_transfer"
MODULE_HOLIDAY = "holiday_master"
MODULE_PROBATION = "probation"
MODULE_TERMINATION = "termination"
