"""Localised, user-facing messages for marketplace errors.

Messages never include storage errors or stack traces; they are looked up by
error code and formatted with the error's params only.
"""

from shared.errors import MarketplaceError

DEFAULT_LANGUAGE = "en"

MESSAGES = {
    "en": {
        "marketplace_error": "Something went wrong",
        "checkout_error": "The order could not be placed",
        "fulfillment_error": "The order could not be updated",
        "empty_cart": "Your cart is empty",
        "product_not_found": "Product {product_id} was not found",
        "product_not_purchasable": "Product {product_id} is not available for purchase",
        "insufficient_stock": 'Not enough "{product_id}" in stock',
        "unavailable": "The service is temporarily unavailable, please try again",
        "unauthenticated": "You need to sign in first",
        "unauthorized": "You are not allowed to do that",
        "order_not_found": "Order {order_id} was not found",
        "invalid_transition": "An order in status {current} cannot become {target}",
        "invalid_request": "The request is invalid",
    },
    "ru": {
        "marketplace_error": "Что-то пошло не так",
        "checkout_error": "Не удалось оформить заказ",
        "fulfillment_error": "Не удалось обновить заказ",
        "empty_cart": "Корзина пуста",
        "product_not_found": "Товар с ID {product_id} не найден",
        "product_not_purchasable": "Товар {product_id} недоступен для покупки",
        "insufficient_stock": 'Недостаточно товара "{product_id}" на складе',
        "unavailable": "Сервис временно недоступен, попробуйте позже",
        "unauthenticated": "Необходимо войти в аккаунт",
        "unauthorized": "Недостаточно прав для этого действия",
        "order_not_found": "Заказ {order_id} не найден",
        "invalid_transition": "Заказ в статусе {current} нельзя перевести в статус {target}",
        "invalid_request": "Неверные данные запроса",
    },
}


def negotiate_language(accept_language: str | None) -> str:
    """Pick the first supported language from an Accept-Language header value."""
    if not accept_language:
        return DEFAULT_LANGUAGE

    candidates = []
    for position, part in enumerate(accept_language.split(",")):
        tag, _, params = part.strip().partition(";")
        quality = 1.0
        if params.strip().startswith("q="):
            try:
                quality = float(params.strip()[2:])
            except ValueError:
                quality = 0.0
        primary = tag.strip().split("-")[0].lower()
        candidates.append((-quality, position, primary))

    for _, _, primary in sorted(candidates):
        if primary in MESSAGES:
            return primary
    return DEFAULT_LANGUAGE


def message_for(code: str, language: str = DEFAULT_LANGUAGE, **params) -> str:
    catalogue = MESSAGES.get(language, MESSAGES[DEFAULT_LANGUAGE])
    template = catalogue.get(code) or MESSAGES[DEFAULT_LANGUAGE].get(code) or catalogue["marketplace_error"]
    try:
        return template.format(**params)
    except KeyError:
        return template


def localize(error: MarketplaceError, language: str = DEFAULT_LANGUAGE) -> str:
    """Render an error as a message in the requested language."""
    return message_for(error.code, language, **error.params)
