from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Prices travel as JSON numbers with two fractional digits
Price = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(round(v, 2)), return_type=float, when_used="json"),
]
