from .metrics import AverageStatistics, MarketRecord
from .news_article import generate_news_article
from .press_release import generate_press_release

__all__ = ["AverageStatistics", "MarketRecord", "generate_news_article", "generate_press_release"]
