"""Constants shared by the rectifier and the classifier."""

APP_NAME = "armor-number-id"
VERSION = "1.0.0"

# Canonical digit image, width x height in pixels
DIGIT_WIDTH = 20
DIGIT_HEIGHT = 28
DIGIT_SIZE = (DIGIT_WIDTH, DIGIT_HEIGHT)  # cv2 dsize order
DIGIT_SHAPE = (DIGIT_HEIGHT, DIGIT_WIDTH)  # numpy rows, cols

# XOR sum of two fully disagreeing canonical binary images
FULL_DIFF_SUM = DIGIT_WIDTH * DIGIT_HEIGHT * 255

TEMPLATE_FILE_PATTERN = "{label}.png"
TEMPLATE_BINARY_THRESHOLD = 127

SUPPORTED_COLOR_ORDERS = ("rgb", "bgr")
