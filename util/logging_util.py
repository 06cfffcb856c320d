import logging
import sys

# Configure logging format
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(name: str, level=logging.INFO) -> logging.Logger:
    """
    Sets up a logger with consistent formatting.

    Args:
        name: Name of the logger (typically __name__ from the calling module)
        level: Logging level (default: INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid adding handlers multiple times
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(console_handler)

    return logger


def log_review_update(logger: logging.Logger, old_card, new_card, quality):
    """
    Logs the scheduling change caused by rating a card.

    Args:
        logger: Logger instance to use
        old_card: Card before the review
        new_card: Card returned by the scheduler
        quality: The Quality the learner gave
    """
    logger.info(f"🃏 Card reviewed - {new_card.id} rated {quality.value}")
    logger.info(
        f"  Interval: {old_card.interval} -> {new_card.interval} days, "
        f"Ease: {old_card.ease_factor:.2f} -> {new_card.ease_factor:.2f}, "
        f"Reviews: {old_card.review_count} -> {new_card.review_count}"
    )
    logger.debug(f"  Next review: {new_card.next_review_date.isoformat()}")


def log_generation_result(logger: logging.Logger, result):
    """
    Logs the outcome of generating cards from a batch of source records.

    Args:
        logger: Logger instance to use
        result: GenerationResult from the card generator
    """
    logger.info(f"📥 Generated {len(result.cards)} new cards ({len(result.errors)} rejected records)")
    for error in result.errors:
        logger.warning(f"  Rejected {error.source_type.value} #{error.index}: {error.message}")
