# Event status that makes an event eligible for overall standings
COMPLETED_STATUS = "Completed"

# Percentile scale: final rank 1 maps to this value
PERCENTILE_SCALE = 100.0

# Weight applied to an event's percentile when it has no positive bearing
DEFAULT_EVENT_WEIGHT = 1.0

# Criteria percentages for an event must total exactly this
CRITERIA_TOTAL_PERCENTAGE = 100.0
