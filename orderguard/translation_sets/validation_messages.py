"""
Order validation messages (i18n).

Shown to the user when the stock validation trigger rejects an order.
Every key carries an "en" entry; the other languages are optional.
"""

VALIDATION_MESSAGE_GROUP = "validation_message"


def validation_messages():
    return {
        "product_does_not_exist": {
            "en": "The selected bicycle model does not exist for this manufacturer.",
            "fr": "Le modèle de vélo sélectionné n'existe pas pour ce fabricant.",
            "es": "El modelo de bicicleta seleccionado no existe para este fabricante.",
        },
        "out_of_stock": {
            "en": "This bicycle model is out of stock.",
            "fr": "Ce modèle de vélo est en rupture de stock.",
            "es": "Este modelo de bicicleta está agotado.",
        },
        "order_quantity_exceeds_stock": {
            "en": "The order quantity exceeds the current stock for this bicycle model.",
            "fr": "La quantité commandée dépasse le stock actuel de ce modèle de vélo.",
            "es": "La cantidad pedida supera el stock actual de este modelo de bicicleta.",
        },
    }
