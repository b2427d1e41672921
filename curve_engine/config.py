import logging
import warnings

from .settings import resolve
from .utils import DateUtils


class AppConfig:
    """Central configuration object.

    All session-level knobs live here: the evaluation date, logging, and the
    numerical settings of the calibration loop driving the bootstrap
    helpers (see ``run_analysis.py``).

    Parameters
    ----------
    val_date : QuantLib.Date or datetime.date
        Evaluation date of the session.
    log_level : str or int
        Level passed to ``logging.basicConfig``.
    """

    def __init__(self, val_date, log_level="WARNING"):
        self.val_date = DateUtils.to_ql_date(val_date)
        self.log_level = log_level

        # ----------------
        # Curves
        # ----------------
        self.allow_extrapolation = False

        # ----------------
        # Calibration loop (root search on the trial curve)
        # ----------------
        self.solver_accuracy = 1.0e-12
        self.solver_max_evaluations = 100
        self.solver_bracket = (-0.05, 0.50)

        # ----------------
        # Global flags
        # ----------------
        self.suppress_warnings = False

    def apply_global_settings(self, settings=None):
        """Set the session evaluation date and configure logging/warnings.

        Returns the session the evaluation date was set on.
        """
        settings = resolve(settings)
        settings.evaluation_date.set(self.val_date)

        logging.basicConfig(
            level=self.log_level,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
        if self.suppress_warnings:
            warnings.filterwarnings("ignore")
        return settings
