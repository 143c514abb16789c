from aiogram import Router

from santa.bot.handlers import draw, start, uploads

router = Router()
router.include_router(start.router)
router.include_router(uploads.router)
router.include_router(draw.router)
