from aiogram import Router, types
from aiogram.filters import Command, CommandStart

from santa.bot.utils import SLOW_DOWN_MESSAGE, check_rate_limit, log_handler_exception
from santa.services.roster import PARTICIPANT_COLUMNS, PRIOR_PAIRING_COLUMNS

router = Router()

HELP_TEXT = (
    "Hello! I'm your Secret Santa assigner.\n\n"
    "1. Send me a CSV of participants with the columns "
    f"<code>{', '.join(PARTICIPANT_COLUMNS)}</code>.\n"
    "2. Optionally send last round's assignments with the columns "
    f"<code>{', '.join(PRIOR_PAIRING_COLUMNS)}</code> "
    "so nobody draws the same person again.\n"
    "3. Use /generate to draw. You'll get a preview and a CSV to download.\n\n"
    "/status shows what is loaded, /reset clears everything."
)


@router.message(CommandStart())
@router.message(Command("help"))
async def command_start_handler(message: types.Message) -> None:
    if not check_rate_limit(message.from_user.id, "start"):
        await message.answer(SLOW_DOWN_MESSAGE)
        return

    try:
        await message.answer(HELP_TEXT)
    except Exception as exc:
        log_handler_exception("start", message.from_user.id, message.chat.id, exc)
        await message.answer("Something went wrong. Please try again later.")
