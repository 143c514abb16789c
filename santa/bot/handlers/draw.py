from __future__ import annotations

from aiogram import Router, types
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext

from santa.bot.keyboards import DRAW_CALLBACK, draw_again_keyboard
from santa.bot.utils import SLOW_DOWN_MESSAGE, check_rate_limit, log_handler_exception
from santa.core.config import get_settings
from santa.services import draw_flow
from santa.services.assignment import AssignmentError, AssignmentInfeasible
from santa.services.roster import dump_pairings_csv

router = Router()


async def _draw(message: types.Message, state: FSMContext) -> None:
    data = await state.get_data()
    try:
        result = draw_flow.run_draw(data, max_attempts=get_settings().max_attempts)
    except AssignmentInfeasible:
        await message.answer(
            "Unable to generate valid Secret Santa assignments. "
            "The previous assignments may leave no valid option; you can try again.",
            reply_markup=draw_again_keyboard(),
        )
        return
    except AssignmentError as exc:
        await message.answer(str(exc))
        return

    await message.answer(draw_flow.format_draw_message(result.pairings))
    await message.answer_document(
        types.BufferedInputFile(
            dump_pairings_csv(result.pairings).encode("utf-8"),
            filename=draw_flow.EXPORT_FILENAME,
        ),
        caption=f"Seed: {result.seed}",
        reply_markup=draw_again_keyboard(),
    )


@router.message(Command("generate"))
async def generate_command_handler(message: types.Message, state: FSMContext) -> None:
    if not check_rate_limit(message.from_user.id, "generate"):
        await message.answer(SLOW_DOWN_MESSAGE)
        return

    try:
        await _draw(message, state)
    except Exception as exc:
        log_handler_exception("generate", message.from_user.id, message.chat.id, exc)
        await message.answer("Failed to generate assignments. Please try again later.")


@router.callback_query(lambda c: c.data == DRAW_CALLBACK)
async def draw_callback_handler(query: types.CallbackQuery, state: FSMContext) -> None:
    if not check_rate_limit(query.from_user.id, "generate"):
        await query.answer(SLOW_DOWN_MESSAGE, show_alert=True)
        return

    try:
        await query.answer()
        await _draw(query.message, state)
    except Exception as exc:
        log_handler_exception("draw_again", query.from_user.id, query.message.chat.id, exc)
        await query.message.answer("Failed to generate assignments. Please try again later.")


@router.message(Command("status"))
async def status_command_handler(message: types.Message, state: FSMContext) -> None:
    if not check_rate_limit(message.from_user.id, "status"):
        await message.answer(SLOW_DOWN_MESSAGE)
        return

    try:
        await message.answer(draw_flow.format_status(await state.get_data()))
    except Exception as exc:
        log_handler_exception("status", message.from_user.id, message.chat.id, exc)
        await message.answer("Something went wrong. Please try again later.")


@router.message(Command("reset"))
async def reset_command_handler(message: types.Message, state: FSMContext) -> None:
    if not check_rate_limit(message.from_user.id, "reset"):
        await message.answer(SLOW_DOWN_MESSAGE)
        return

    try:
        await state.clear()
        await message.answer("Cleared. Send a participants CSV to start again.")
    except Exception as exc:
        log_handler_exception("reset", message.from_user.id, message.chat.id, exc)
        await message.answer("Something went wrong. Please try again later.")
