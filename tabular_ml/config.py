import os

LOG_LEVEL = os.getenv("TABULAR_ML_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Evaluation harness
DATA_PATH = os.getenv("TABULAR_ML_DATA", "data/iris.csv")
REPORTS_DIR = os.getenv("TABULAR_ML_REPORTS_DIR", "evaluation/reports")

# Algorithm defaults
DEFAULT_K = int(os.getenv("TABULAR_ML_K", "3"))
DEFAULT_TEST_RATIO = float(os.getenv("TABULAR_ML_TEST_RATIO", "0.1"))
DEFAULT_SEED = int(os.getenv("TABULAR_ML_SEED", "41"))

# Gradient descent loss is recorded every LOSS_LOG_INTERVAL iterations
LOSS_LOG_INTERVAL = 100
