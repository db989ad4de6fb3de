#!/usr/bin/env python3
"""
Вывести 402-challenge, который сервис отдаст с текущими настройками (.env / переменные окружения).
Запуск из корня проекта: python -m scripts.print_challenge
"""
import json

from x402gate.core.config import get_settings
from x402gate.paywall import PaywallConfig, issue_challenge


def main():
    settings = get_settings()
    config = PaywallConfig.from_settings(settings)
    challenge = issue_challenge(config)
    print(f"network={config.network} asset={config.asset} payTo={config.pay_to}")
    print(f"facilitator={settings.facilitator_url} backend={settings.entitlement_backend}\n")
    print(json.dumps(challenge.to_wire(), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
