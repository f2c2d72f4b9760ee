# Fixed event-weight rubric: Technical, Content, Rules-and-Impact,
# Presentation-Impact
RATING_WEIGHTS = {
    "tl": 0.4,
    "c": 0.3,
    "ri": 0.2,
    "pi": 0.1,
}

# Weight points shared out across every category on top of its base
BEARING_POOL = 16.0
