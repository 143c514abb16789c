from __future__ import annotations

import html

from aiogram import F, Router, types
from aiogram.fsm.context import FSMContext
from loguru import logger

from santa.bot.keyboards import generate_keyboard
from santa.bot.utils import SLOW_DOWN_MESSAGE, check_rate_limit, decode_upload, log_handler_exception
from santa.core.config import get_settings
from santa.services import draw_flow
from santa.services.roster import KIND_PARTICIPANTS, InputValidationError

router = Router()

CSV_MIME_TYPES = {"text/csv", "application/csv", "text/comma-separated-values"}


def _is_csv(document: types.Document) -> bool:
    if document.mime_type in CSV_MIME_TYPES:
        return True
    return bool(document.file_name) and document.file_name.lower().endswith(".csv")


@router.message(F.document)
async def document_handler(message: types.Message, state: FSMContext) -> None:
    if not check_rate_limit(message.from_user.id, "upload"):
        await message.answer(SLOW_DOWN_MESSAGE)
        return

    document = message.document
    if not _is_csv(document):
        await message.answer("Please send a .csv file.")
        return

    max_bytes = get_settings().max_upload_bytes
    if document.file_size and document.file_size > max_bytes:
        await message.answer(f"That file is too large. The limit is {max_bytes // 1024} KB.")
        return

    try:
        payload = await message.bot.download(document)
        text = decode_upload(payload.read())
        result = draw_flow.handle_upload(text)
    except UnicodeDecodeError:
        await message.answer("The file must be UTF-8 encoded text.")
        return
    except InputValidationError as exc:
        details = "\n".join(html.escape(error) for error in exc.errors)
        await message.answer(f"Invalid CSV:\n{details}")
        return
    except Exception as exc:
        log_handler_exception("upload", message.from_user.id, message.chat.id, exc)
        await message.answer("Something went wrong. Please try again later.")
        return

    await state.update_data(**result.state_update)
    logger.bind(user_id=message.from_user.id, kind=result.kind, count=result.count).info("Roster uploaded")

    if result.kind == KIND_PARTICIPANTS:
        reply = f"{result.count} participants loaded successfully."
        if result.duplicates:
            reply += (
                "\n\nWarning: these identifiers appear more than once, so a draw will fail "
                "until they are made unique: " + ", ".join(html.escape(d) for d in result.duplicates)
            )
    else:
        reply = f"{result.count} previous assignments loaded successfully."
    await message.answer(reply, reply_markup=generate_keyboard())
