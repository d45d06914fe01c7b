from typing import Any, Dict, List, Optional

TEST_API_KEY = "agx_test_0123456789abcdef"

ACP = "/acp/v1"
UCP = "/ucp/v1"

ADA_ADDRESS = {
    "name": "Ada Lovelace",
    "line_one": "12 Analytical Row",
    "city": "Brooklyn",
    "state": "NY",
    "country": "US",
    "postal_code": "11201",
}

ADA_BUYER = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@agentix.dev",
    "phone_number": "+15550100",
}

UCP_ADDRESS = {
    "recipient_name": "Grace Hopper",
    "street_address": "1 Compiler Way",
    "city": "Arlington",
    "region": "VA",
    "postal_code": "22201",
    "country_code": "US",
}


def checkout_body(items: List[Dict[str, Any]], address: Optional[Dict[str, Any]] = None, **extra) -> Dict[str, Any]:
    body: Dict[str, Any] = {"items": items}
    if address is not None:
        body["fulfillment_address"] = address
    body.update(extra)
    return body


def spt(token: str = "spt_test_visa") -> Dict[str, Any]:
    return {"payment_token": {"type": "stripe_spt", "token": token}}


def totals_by_type(body: Dict[str, Any]) -> Dict[str, int]:
    return {t["type"]: t["amount"] for t in body["totals"]}
