from aiogram.utils.keyboard import InlineKeyboardBuilder

DRAW_CALLBACK = "draw"


def generate_keyboard():
    keyboard = InlineKeyboardBuilder()
    keyboard.button(text="Generate assignments", callback_data=DRAW_CALLBACK)
    return keyboard.as_markup()


def draw_again_keyboard():
    keyboard = InlineKeyboardBuilder()
    keyboard.button(text="Draw again", callback_data=DRAW_CALLBACK)
    return keyboard.as_markup()
