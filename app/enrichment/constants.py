"""
Shared constants for the enrichment jobs.
"""

CANDIDATE_SEARCH_DOMAINS = ['ballotpedia.org', 'votesmart.org', 'opensecrets.org', 'ontheissues.org']
CANDIDATE_SEARCH_MAX_RESULTS = 5

BILL_SEARCH_DOMAINS = ['congress.gov', 'govtrack.us', 'legiscan.com']
BILL_SEARCH_MAX_RESULTS = 3

CANDIDATE_POSITION_RANGE = (-1.0, 1.0)
BILL_TAG_RANGE = (0.0, 1.0)

CANDIDATE_POSITIONS_PROMPT = """Extract political positions on key issues from the provided text.
Return a JSON object with issue names as keys and positions as numeric values between -1 (strongly opposed)
and 1 (strongly supportive). Issues should include environment, healthcare, economy, education, immigration,
and any other relevant issues mentioned."""

BILL_TAGS_PROMPT = """Identify the policy issues the bill described in the provided text addresses.
Return a JSON object with lowercase issue names as keys (for example environment, health, economy,
education, infrastructure, taxes) and numeric values between 0 (barely related) and 1 (central to the bill)."""

ISSUE_KEYS = ('environment', 'healthcare', 'economy', 'education', 'immigration')

# Used when priming cannot reach the providers
PARTY_DEFAULT_POSITIONS = {
    'Democratic': dict(zip(ISSUE_KEYS, (0.8, 0.7, 0.4, 0.7, 0.6))),
    'Republican': dict(zip(ISSUE_KEYS, (-0.3, -0.5, 0.8, 0.3, -0.4))),
}
OTHER_PARTY_DEFAULT_POSITIONS = dict(zip(ISSUE_KEYS, (0.4, 0.3, 0.6, 0.8, 0.1)))

# News / inspiration posts
SUMMARY_SYSTEM_PROMPT = 'You are an assistant that creates brief, inspiring summaries of political news articles.'
SUMMARY_MAX_TOKENS = 150
TOPICS_SYSTEM_PROMPT = 'You are an assistant that extracts political topics from news articles.'
TOPICS_MAX_TOKENS = 150
DEFAULT_TOPICS = ['politics']
NO_SUMMARY_TEXT = 'No summary available.'

# Importance scoring
TOPIC_SATURATION = 5
TOPIC_WEIGHT = 0.4
RECENCY_WINDOW_DAYS = 30
RECENCY_WEIGHT = 0.6
