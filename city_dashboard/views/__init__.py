from .overview_view import OverviewView
from .distributions_view import DistributionsView
from .comparisons_view import ComparisonsView
from .correlations_view import CorrelationsView
from .geography_view import GeographyView

__all__ = ["OverviewView", "DistributionsView", "ComparisonsView", "CorrelationsView", "GeographyView"]
