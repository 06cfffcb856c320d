import os
from typing import Optional, Union

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    ConversationHandler,
    MessageHandler,
    filters,
)

from portuguese.card_store import CardStore
from portuguese.database import init_db, load_cards, save_card
from portuguese.exceptions import InvalidSessionTransition
from portuguese.models import Card
from portuguese.scheduler import Quality
from portuguese.session import ReviewSession, SessionState
from portuguese.stats import FlashcardStats, get_flashcard_stats
from util.logging_util import log_review_update, setup_logger

logger = setup_logger(__name__)

# Conversation states
REVIEWING = 0

REVIEW_BUTTON_TEXT = "🃏 Review"
STOP_BUTTON_TEXT = "🚫 Stop Review"

# Keyboard shortcuts: digits rate the revealed card, space reveals it
KEY_BINDINGS = {
    "1": Quality.AGAIN,
    "2": Quality.HARD,
    "3": Quality.GOOD,
    "4": Quality.EASY,
}
REVEAL_KEY = " "
REVEAL_ACTION = "reveal"

# Key used in context.user_data while a review is running
_UD_SESSION = "review_session"

REVEAL_KEYBOARD = InlineKeyboardMarkup([
    [InlineKeyboardButton("👀 Show answer", callback_data="review_reveal")],
    [InlineKeyboardButton(STOP_BUTTON_TEXT, callback_data="review_stop")],
])

RATING_KEYBOARD = InlineKeyboardMarkup([
    [
        InlineKeyboardButton("1 Again", callback_data="review_rate_again"),
        InlineKeyboardButton("2 Hard", callback_data="review_rate_hard"),
    ],
    [
        InlineKeyboardButton("3 Good", callback_data="review_rate_good"),
        InlineKeyboardButton("4 Easy", callback_data="review_rate_easy"),
    ],
    [InlineKeyboardButton(STOP_BUTTON_TEXT, callback_data="review_stop")],
])


def parse_key(key: str) -> Optional[Union[Quality, str]]:
    """Map a keyboard shortcut to a Quality or REVEAL_ACTION. Unbound keys give None."""
    if key == REVEAL_KEY:
        return REVEAL_ACTION
    return KEY_BINDINGS.get(key.strip())


def parse_callback_data(data: str) -> Optional[Union[Quality, str]]:
    if data == "review_reveal":
        return REVEAL_ACTION
    if data.startswith("review_rate_"):
        try:
            return Quality(data.removeprefix("review_rate_"))
        except ValueError:
            return None
    return None


def format_front(session: ReviewSession) -> str:
    card = session.current_card
    text = f"Card {session.position + 1}/{session.total} · {card.category}\n\n{card.front}"
    if card.hint:
        text += f"\n\n💡 {card.hint}"
    return text


def format_back(session: ReviewSession) -> str:
    card = session.current_card
    text = f"{format_front(session)}\n\n➡️ {card.back}"
    if card.example_sentence and card.example_sentence not in card.back:
        text += f"\n\n📝 {card.example_sentence}"
    return text


def format_stats(stats: FlashcardStats) -> str:
    return (
        f"📊 {stats.total} active cards, {stats.due_today} due today\n"
        f"Mastered: {stats.mastered} · Learning: {stats.learning} · "
        f"Struggling: {stats.struggling} · Archived: {stats.archived}"
    )


def _persist_review(old_card: Card, new_card: Card, quality: Quality) -> None:
    save_card(new_card)
    log_review_update(logger, old_card, new_card, quality)


def _cleanup_user_data(context: ContextTypes.DEFAULT_TYPE) -> None:
    context.user_data.pop(_UD_SESSION, None)


async def _reply(update: Update, text: str, reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
    if update.callback_query is not None:
        await update.callback_query.edit_message_text(text, reply_markup=reply_markup)
    else:
        await update.message.reply_text(text, reply_markup=reply_markup)


async def _finish(update: Update, context: ContextTypes.DEFAULT_TYPE, session: ReviewSession) -> int:
    stats = get_flashcard_stats(session.store.all())
    await _reply(
        update,
        f"✅ Session complete! You reviewed {session.reviewed_count} "
        f"card{'s' if session.reviewed_count != 1 else ''}.\n\n{format_stats(stats)}",
    )
    _cleanup_user_data(context)
    return ConversationHandler.END


async def start_review(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Start a review session over every card due today."""
    store = CardStore(load_cards())
    session = ReviewSession(store, on_review=_persist_review)
    session.start()

    if session.is_complete:
        stats = get_flashcard_stats(store.all())
        await update.message.reply_text(
            f"No flashcards due today. Come back tomorrow!\n\n{format_stats(stats)}"
        )
        return ConversationHandler.END

    logger.info(f"Review session started with {session.total} due cards")
    context.user_data[_UD_SESSION] = session
    await update.message.reply_text(format_front(session), reply_markup=REVEAL_KEYBOARD)
    return REVIEWING


async def _perform(
    update: Update,
    context: ContextTypes.DEFAULT_TYPE,
    action: Union[Quality, str],
) -> int:
    session: Optional[ReviewSession] = context.user_data.get(_UD_SESSION)
    if session is None:
        await _reply(update, "No review in progress. Use /review to start one.")
        return ConversationHandler.END

    try:
        if action == REVEAL_ACTION:
            session.reveal()
        else:
            session.rate(action)
    except InvalidSessionTransition:
        await _reply(update, "Reveal the answer first (space or 👀 Show answer).", REVEAL_KEYBOARD)
        return REVIEWING
    except Exception as e:
        logger.error(f"Error during review: {e}")
        await _reply(update, f"Error saving review: {e}")
        _cleanup_user_data(context)
        return ConversationHandler.END

    if session.is_complete:
        return await _finish(update, context, session)
    if session.state == SessionState.BACK_SHOWN:
        await _reply(update, format_back(session), RATING_KEYBOARD)
    else:
        await _reply(update, format_front(session), REVEAL_KEYBOARD)
    return REVIEWING


async def handle_review_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Handle the inline reveal and rating buttons."""
    query = update.callback_query
    await query.answer()

    if query.data == "review_stop":
        return await stop_review(update, context)

    action = parse_callback_data(query.data)
    if action is None:
        return REVIEWING
    return await _perform(update, context, action)


async def handle_review_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Handle typed shortcuts: 1-4 to rate, space to reveal."""
    action = parse_key(update.message.text)
    if action is None:
        await update.message.reply_text(
            "Press space to reveal, then 1 (again), 2 (hard), 3 (good) or 4 (easy)."
        )
        return REVIEWING
    return await _perform(update, context, action)


async def stop_review(update: Update, context: ContextTypes.DEFAULT_TYPE) -> int:
    """Stop the session early. Ratings already given are kept."""
    session: Optional[ReviewSession] = context.user_data.get(_UD_SESSION)
    reviewed = session.reviewed_count if session is not None else 0
    _cleanup_user_data(context)
    await _reply(update, f"Review stopped after {reviewed} card{'s' if reviewed != 1 else ''}.")
    return ConversationHandler.END


def get_review_conversation_handler() -> ConversationHandler:
    """Create the conversation handler for review sessions."""
    return ConversationHandler(
        entry_points=[
            MessageHandler(filters.Regex(r"^🃏 Review$"), start_review),
            CommandHandler("review", start_review),
        ],
        states={
            REVIEWING: [
                CallbackQueryHandler(handle_review_callback, pattern=r"^review_"),
                MessageHandler(filters.Regex(r"^🚫 Stop Review$"), stop_review),
                MessageHandler(filters.TEXT & ~filters.COMMAND, handle_review_text),
            ],
        },
        fallbacks=[
            CommandHandler("review_stop", stop_review),
        ],
        name="review_conversation",
        persistent=False,
    )


def main():
    init_db()
    application = Application.builder().token(os.environ["TELEGRAM_BOT_TOKEN"]).build()
    application.add_handler(get_review_conversation_handler())
    logger.info("Starting review bot...")
    application.run_polling()


if __name__ == "__main__":
    main()
