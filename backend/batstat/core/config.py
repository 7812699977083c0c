# SET UP PYTHON VARIABLES
import os

from dotenv import load_dotenv

load_dotenv()


GRID_SIZE = 40 # 40x40 grid for hit positioning
HOME_PLATE = (0.5, 0.95) # bottom center with 5% inset

TAP_RADIUS_PX = 30.0
RECENT_AT_BATS_LIMIT = 10

SPRAY_CHART_TYPES = {"1B", "2B", "3B", "HR"}

# recorded for the runner or as a bare count, never a turn at the plate
UNNUMBERED_TYPES = {"R", "RBI"}

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

IMPORT_PAGE_SIZE = 1000
