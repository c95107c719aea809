"""Application-wide constants and configuration values."""

# Output filename bases; combined with a unique timestamp on save to prevent clobbering
OUTPUT_PPTX_FILENAME = r"slidesync_output.pptx"
OUTPUT_TEMPLATE_FILENAME = r"slidesync_edit_template.json"
OUTPUT_TEXT_FILENAME = r"slidesync_presentation_text.txt"
OUTPUT_OPERATIONS_FILENAME = r"slidesync_operations.json"

# OAuth scope for reading and batch-updating presentations with a service account
SLIDES_SCOPES: list[str] = ["https://www.googleapis.com/auth/presentations"]

# Bullet preset used when a paragraph's glyph matches nothing in the preset table
DEFAULT_BULLET_PRESET = "BULLET_DISC_CIRCLE_SQUARE"

# Fallback for get_debug_mode() in utils
DEBUG_MODE_DEFAULT = False  # Hard-coded default
