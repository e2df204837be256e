# Global UI Strings and Constants
APP_VERSION = "v2.0.0"

START_TEXT = """
👋 *Ассаляму алейкум, {name}!*

Я помогу вам систематизировать повторение Корана.

*🎯 Как это работает:*
1. Укажите, сколько страниц вы выучили
2. Получайте ежедневный план повторения
3. Добавляйте новые страницы по мере изучения

*📅 Основные кнопки:*
• *План на сегодня* — ваш дневной маршрут
• *Добавить страницу* — +1 страница к прогрессу
• *Дополнительно* — статистика и настройки

_Начните с кнопки «➕ Добавить страницу»!_
"""

MAIN_MENU_TEXT = "Главное меню:"
USE_MENU_TEXT = "Используйте кнопки меню для навигации."
GENERIC_ERROR_TEXT = "❌ Произошла ошибка. Попробуйте снова или нажмите /start."
STORE_ERROR_TEXT = "⚠️ Не удалось сохранить изменения. Данные не изменены, попробуйте позже."

# Keyboard Labels
BTN_PLAN = "📅 План на сегодня"
BTN_ADD_PAGE = "➕ Добавить страницу"
BTN_UNDO = "↩️ Отменить"
BTN_MORE = "⚙️ Дополнительно"
BTN_HOME = "🏠 На главную"

BTN_STATS_MENU = "📊 Статистика"
BTN_SETTINGS = "⚙️ Настройки"

BTN_MY_STATS = "📊 Моя статистика"
BTN_WEEKLY = "📈 Прогресс за неделю"
BTN_HISTORY = "📋 История действий"
BTN_EXPORT = "📤 Экспорт данных"

BTN_MY_PAGES = "📝 Мои страницы"
BTN_SECTIONS_PER_DAY = "🎯 Джузы в день"
BTN_PRIORITY = "📚 Доп. джузы"
BTN_RESET_PLAN = "🔄 Обновить план"
BTN_BACK_SETTINGS = "⚙️ Назад в настройки"

BTN_CURRENT_PROGRESS = "📊 Текущий прогресс"
BTN_SET_PAGES = "✏️ Изменить вручную"

BTN_PRIORITY_ADD = "➕ Добавить джуз"
BTN_PRIORITY_REMOVE = "🗑️ Удалить джуз"
BTN_PRIORITY_LIST = "📋 Список джузов"
BTN_PRIORITY_CLEAR = "❌ Очистить всё"

SECTIONS_PER_DAY_CHOICES = ("1", "2", "3", "4", "5")

# Prayer slot display names, keyed like services.plan_builder.PRAYER_SLOTS
SLOT_NAMES = {
    "fajr": "Фаджр",
    "dhuhr": "Зухр",
    "asr": "Аср",
    "maghrib": "Магриб",
    "isha": "Иша",
}

# Plan
PLAN_TEXT = """
📅 *ПЛАН НА СЕГОДНЯ*

🎯 *Джузы для повторения:*
{sections}

📄 *Страницы:* {total_pages}

🕌 *По намазам:*
{slots}

📊 *Ваш прогресс:*
• Страниц: {pages}/{total}
• Джузов: {known_sections}/30
• Джузов в день: {per_day}

_План автоматически обновляется каждый день_
"""
PLAN_SLOT_LINE = "• {name}: стр. {start}–{end}"
PLAN_SECTION_PRIORITY = "{number} (доп.)"
PLAN_SECTION_PARTIAL = "{number} (частично)"

NOTHING_TO_REVIEW_TEXT = """
📅 *План на сегодня*

🎯 *Нет джузов для повторения*

📊 *Ваш прогресс:*
• Выучено страниц: *{pages}/{total}*
• Всего джузов: *{known_sections}/30*

👉 Нажмите «➕ Добавить страницу», чтобы продолжить
"""

PLAN_ALREADY_ISSUED_TEXT = """
📅 *Ваш план на сегодня уже готов!*

Если вы добавили новые страницы и хотите обновить план:
1. Нажмите «⚙️ Дополнительно»
2. Выберите «⚙️ Настройки» → «🔄 Обновить план»
"""

# Progress
ALL_PAGES_DONE_TEXT = "🎉 *МАШАЛЛАХ!* Вы выучили весь Коран!\n\nВсе {total} страниц изучены."
QURAN_COMPLETED_TEXT = "🎉 *МАШАЛЛАХ!* Вы завершили 30-й джуз и весь Коран!\n\n"
SECTION_COMPLETED_TEXT = "🎉 *МАШАЛЛАХ!* Вы завершили джуз {number}!\n\n"
PAGE_ADDED_TEXT = """✅ *Добавлена 1 страница*

📊 *Прогресс:*
• Страниц: *{pages}/{total}*
• Джузов: *{known_sections}/30*

🎯 *Джуз {section}:* {done}/{size} стр."""
NEXT_SECTION_TEXT = "\n\n📖 *Следующий:* джуз {number}"
PLAN_WILL_UPDATE_TEXT = "\n\n📅 *План на сегодня будет пересчитан.*"
UNDO_HINT_TEXT = "\n\n↩️ Можно отменить действие."
NOT_UNDOABLE_TEXT = "\n\n⚠️ Действие не записано в историю, отменить его не получится."

PAGES_MENU_TEXT = """
📝 *Управление страницами*

Текущий прогресс:
• Выучено: *{pages}* стр.
• Джуз {section}: *{done}/{size}* стр.

Выберите действие:
"""

CURRENT_PROGRESS_TEXT = """
📊 *Текущий прогресс*

*Основные показатели:*
• Выучено страниц: *{pages}/{total}*
• Всего джузов: *{known_sections}/30*
• Джузов в день: *{per_day}*

*Текущий джуз {section}:*
{done}/{size} стр.

*Расчётные данные:*
• Базовых джузов: {base_sections}
• Доп. джузов: {priority_count}
{priority_line}
"""

ASK_PAGES_TEXT = """
✏️ *Ручное обновление страниц*

Текущее значение: *{pages}* стр.

Введите новое количество выученных страниц (от 0 до {total}):

_Например: 150_
"""
PAGES_UPDATED_TEXT = "✅ *Обновлено!*\n\nНовое количество страниц: *{pages}*"
PAGES_INVALID_TEXT = "❌ Введите число от 0 до {total}"
NOTHING_CHANGED_TEXT = "ℹ️ Значение не изменилось."

SECTIONS_PER_DAY_TEXT = """
🎯 *Джузов в день*

Текущее значение: *{per_day}*

Это примерно *{pages}* страниц ежедневно.

*Рекомендации:*
• 1 джуз (20 стр.) — стандартный темп
• 2 джуза (40 стр.) — активное повторение
• 3+ джуза — для опытных хафизов

Выберите новое значение:
"""
SECTIONS_PER_DAY_UPDATED_TEXT = "✅ *Обновлено!*\n\nТеперь вы будете повторять *{per_day}* джуз(а) в день (≈ {pages} стр.)."

# Priority sections
PRIORITY_MENU_TEXT = "📚 *Дополнительные джузы*\n\n{current}\n\nДополнительные джузы повторяются наравне с выученными.\n\nВыберите действие:"
PRIORITY_CURRENT_TEXT = "*Текущие джузы:* {sections}"
PRIORITY_NONE_TEXT = "*Дополнительных джузов пока нет*"
ASK_PRIORITY_ADD_TEXT = """➕ *Добавить джузы*

{current}

Введите номера джузов (1-30):
• 5
• 5, 10, 15
• 1 2 3
"""
ASK_PRIORITY_REMOVE_TEXT = """🗑️ *Удалить джузы*

Текущие джузы: {sections}

Введите номера джузов для удаления, например: 5, 10
"""
PRIORITY_EMPTY_TEXT = "📋 *Список пуст*\n\nДополнительных джузов пока нет."
PRIORITY_LIST_TEXT = "📋 *Ваши дополнительные джузы*\n\n{lines}\n\n*Всего:* {count}"
PRIORITY_INVALID_TEXT = "❌ *Неверный формат*\n\nВведите номера от 1 до 30."
PRIORITY_ALREADY_TEXT = "ℹ️ *Эти джузы уже добавлены*"
PRIORITY_NOT_FOUND_TEXT = "ℹ️ *Этих джузов нет в списке*"
PRIORITY_ADDED_TEXT = "✅ *Список обновлён*\n\n*Всего джузов:* {sections}"
PRIORITY_REMOVED_TEXT = "✅ *Удалено*\n\n*Остались:* {sections}"
PRIORITY_CLEARED_TEXT = "✅ *Все дополнительные джузы удалены*"

# Undo / history
NO_ACTION_TO_UNDO_TEXT = "❌ *Нет действий для отмены*\n\nВы ещё ничего не меняли."
UNDO_DONE_TEXT = "✅ *Отменено:* {description}"
UNDO_FAILED_TEXT = "❌ *Не удалось отменить действие*"
HISTORY_EMPTY_TEXT = "📋 *История действий пуста*\n\nВы ещё не совершали изменений."
HISTORY_HEADER_TEXT = "📋 *Последние действия:*\n\n"
HISTORY_LINE = "{index}. {description} ({when})\n"
HISTORY_FOOTER_TEXT = "\n↩️ Можно отменить последнее действие."

HISTORY_ADD_PAGE = "Добавлена страница: {prev} → {new}"
HISTORY_SET_PAGES = "Изменены страницы: {prev} → {new}"
HISTORY_SET_SECTIONS_PER_DAY = "Джузов в день: {prev} → {new}"
HISTORY_ADD_PRIORITY = "Добавлены джузы: {sections}"
HISTORY_REMOVE_PRIORITY = "Удалены джузы: {sections}"
HISTORY_CLEAR_PRIORITY = "Очищены все доп. джузы"

# Stats
MORE_MENU_TEXT = """
⚙️ *Дополнительные возможности*

*📊 Статистика* — ваш прогресс и достижения
*⚙️ Настройки* — управление параметрами
"""
STATS_MENU_TEXT = """
📊 *Статистика и аналитика*

*📊 Моя статистика* — общий прогресс
*📈 Прогресс за неделю* — динамика за 7 дней
*📋 История действий* — просмотр и отмена изменений
*📤 Экспорт данных* — скачать историю в CSV
"""
SETTINGS_TEXT = """
⚙️ *Настройки*

Текущие параметры:
• Выучено страниц: *{pages}*
• Джузов в день: *{per_day}*
• Доп. джузов: *{priority_count}*

Выберите параметр для изменения:
"""
MY_STATS_TEXT = """
📊 *Ваша статистика*

📈 *Прогресс:*
• Страниц: *{pages}/{total}*
{bar}
• Базовых джузов: *{base_sections}*
• Доп. джузов: *{priority_count}*
• Всего джузов: *{known_sections}/30*
• Джузов в день: *{per_day}*

🎯 *Текущий джуз {section}:*
{done}/{size} стр.
"""
WEEK_SUMMARY_TEXT = "\n📈 *За неделю:*\n• Новых страниц: *+{new_pages}*\n• Повторено: *{repeated}* стр."
WEEK_EMPTY_TEXT = "📊 *Пока нет данных за неделю*\n\nДобавьте несколько страниц для отслеживания прогресса."
WEEK_HEADER_TEXT = "📈 *Прогресс за 7 дней*\n\n"
WEEK_DAY_TEXT = "*{date}:*\n• Новых: {new_pages} стр.\n• Повторено: {repeated} стр.\n• Всего: {pages} стр.\n\n"
WEEK_TOTAL_TEXT = "*Итого за неделю:*\n• Новых страниц: *+{new_pages}*\n• Повторено: *{repeated}* стр.\n• Среднее в день: *{average}* стр."
EXPORT_EMPTY_TEXT = "❌ *Нет данных для экспорта*\n\nДобавьте несколько страниц для начала отслеживания."
EXPORT_DONE_TEXT = "✅ *Статистика экспортирована*"

RESET_PLAN_TEXT = "🔄 *План сброшен*\n\nНажмите «📅 План на сегодня», чтобы получить новый план с учётом всех изменений."

REMINDER_TEXT = "🕌 *Время для повторения Корана!*\n\nНажмите «📅 План на сегодня», чтобы получить дневной план."


def join_sections(sections) -> str:
    return ", ".join(str(s) for s in sections) if sections else "нет"
