import logging

import requests

from tiersync.core.config import settings

logger = logging.getLogger(__name__)


def send_slack_message(text: str) -> None:
    webhook = settings.slack_webhook_url
    url = webhook.get_secret_value() if webhook else None
    if not url:
        return  # 설정 안 되어 있으면 조용히 스킵

    try:
        requests.post(url, json={"text": text}, timeout=3)
    except requests.RequestException as e:
        # 알림 실패가 webhook 응답을 바꾸면 안 됨
        logger.warning("Slack alert failed: %s", e)
