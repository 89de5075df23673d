"""POST /v1/rule-sets/validate - Check a rule set collection before use"""

from fastapi import APIRouter

from ledger_balance.api.v1.schemas import RuleSetValidationRequest, RuleSetValidationResponse
from ledger_balance.domain.rule_sets import validate_rule_sets
from ledger_balance.infrastructure.observability.metrics import rule_set_validation_counter

router = APIRouter()


@router.post("/rule-sets/validate", response_model=RuleSetValidationResponse)
def validate_rule_set_collection(request_body: RuleSetValidationRequest):
    """
    Validate rule sets without computing a balance.

    A collection is valid when it is non-empty and every rule set has all
    four policy fields in the expected numeric form.
    """
    valid = validate_rule_sets(request_body.rule_sets)
    rule_set_validation_counter.labels(valid=str(valid).lower()).inc()
    return RuleSetValidationResponse(valid=valid)
