import warnings
from statsmodels.tools import sm_exceptions
from ._null import null_model, score_test, NullModel, SCORE_COLUMNS
from ._marginal import marginal, OLS_COLUMNS

warnings.filterwarnings(action="error", category=sm_exceptions.ValueWarning)

__all__ = ["null_model", "score_test", "marginal", "NullModel"]
