"""User-defined alert rule collection."""
import logging

logger = logging.getLogger("biogasmonitor.alerts.rules")


class RuleStore:
    def __init__(self, rules=None, on_change=None):
        self._rules = list(rules or [])
        self._on_change = on_change

    def add_rule(self, rule):
        self._rules.append(rule)
        logger.info(f"Added rule {rule.id}: {rule.parameter} {rule.condition.symbol} {rule.threshold}")
        self._changed()

    def remove_rule(self, rule_id):
        remaining = [r for r in self._rules if r.id != rule_id]
        if len(remaining) == len(self._rules):
            logger.debug(f"Rule {rule_id} not found, nothing removed")
            return
        self._rules = remaining
        logger.info(f"Removed rule {rule_id}")
        self._changed()

    def get_rule(self, rule_id):
        for r in self._rules:
            if r.id == rule_id:
                return r
        return None

    def list_rules(self):
        return list(self._rules)

    def __len__(self):
        return len(self._rules)

    def _changed(self):
        if self._on_change:
            self._on_change()
