"""Constants and payload conventions for league history."""

# Two scores within this tolerance are a tie
SCORE_EPSILON = 1e-6

# Exponent for Pythagorean expected wins
PYTHAGOREAN_EXPONENT = 2.37

# Weekly payload week keys: "week1".."week17"
WEEK_KEY_PREFIX = 'week'

# Roster slot whose points count for the team
STARTER_SLOT = 'starter'

# Default limit for top-N record lists
DEFAULT_RECORDS_LIMIT = 10

# Margin of victory histogram bin width (points)
MARGIN_BIN_WIDTH = 5

# Source data file names inside the data directory
OWNERS_FILE = 'owners-data.json'
STANDINGS_FILE = 'season_standings-data.json'
WEEKLY_MATCHUPS_FILE = 'weekly_matchups-data.json'
LEAGUE_METADATA_FILE = 'league-metadata.json'

# Data sources tracked by the store; derived results declare which they read
SOURCE_OWNERS = 'owners'
SOURCE_STANDINGS = 'standings'
SOURCE_WEEKLY = 'weekly'
SOURCE_METADATA = 'metadata'
ALL_SOURCES = (SOURCE_OWNERS, SOURCE_STANDINGS, SOURCE_WEEKLY, SOURCE_METADATA)
