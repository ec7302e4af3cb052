import logging
from dataclasses import dataclass
from typing import List

from tencentcloud.common import credential
from tencentcloud.common.exception.tencent_cloud_sdk_exception import TencentCloudSDKException
from tencentcloud.common.profile.client_profile import ClientProfile
from tencentcloud.common.profile.http_profile import HttpProfile
from tencentcloud.sms.v20210111 import models
from tencentcloud.sms.v20210111.sms_client import SmsClient

from .notifier import DeliveryFailure, NotificationMessage, Notifier


logger = logging.getLogger(__name__)


def _create_client(secret_id: str, secret_key: str, region: str, timeout_seconds: int) -> SmsClient:
    """Create a Tencent SMS client with a request timeout on the HTTP profile."""
    if not secret_id or not secret_key:
        raise DeliveryFailure("Missing Tencent Cloud credentials for SMS delivery")
    cred = credential.Credential(secret_id, secret_key)
    http_profile = HttpProfile()
    http_profile.reqTimeout = timeout_seconds
    client_profile = ClientProfile()
    client_profile.httpProfile = http_profile
    return SmsClient(cred, region, client_profile)


def _build_request(message: NotificationMessage, app_id: str, sign_name: str, template_id: str) -> models.SendSmsRequest:
    """Build a SendSms request.

    The template is expected to take two parameters: the subject and the body.
    The bound sender maps to ``SenderId`` (used for international routes).
    """
    request = models.SendSmsRequest()
    request.PhoneNumberSet = [message.recipient]
    request.SmsSdkAppId = app_id
    request.SignName = sign_name
    request.TemplateId = template_id
    request.TemplateParamSet = [message.subject, message.body]
    if message.sender:
        request.SenderId = message.sender
    return request


@dataclass(frozen=True)
class SmsNotifier(Notifier):
    """Send alerts as SMS through Tencent Cloud.

    A fresh SDK client is created per notify call, so the notifier holds no
    connection state and is safe to share.
    """

    secret_id: str = ""
    secret_key: str = ""
    region: str = "ap-guangzhou"
    app_id: str = ""
    sign_name: str = ""
    template_id: str = ""
    timeout_seconds: int = 10

    def _deliver(self, message: NotificationMessage) -> None:
        try:
            client = _create_client(self.secret_id, self.secret_key, self.region, self.timeout_seconds)
            request = _build_request(message, self.app_id, self.sign_name, self.template_id)
            response = client.SendSms(request)
        except TencentCloudSDKException as e:
            raise DeliveryFailure(f"Tencent SMS request failed ({e.get_code()}): {e.get_message()}", raw_error=e)

        statuses = list(getattr(response, "SendStatusSet", None) or [])
        if not statuses:
            raise DeliveryFailure("Tencent SMS returned no send status", raw_error=response)

        rejected: List[object] = [s for s in statuses if getattr(s, "Code", None) != "Ok"]
        if rejected:
            first = rejected[0]
            raise DeliveryFailure(
                f"Tencent SMS rejected message to {getattr(first, 'PhoneNumber', message.recipient)} "
                f"({getattr(first, 'Code', None)}): {getattr(first, 'Message', None)}",
                raw_error=first,
            )

        logger.info(f"SMS alert sent to {message.recipient} (serial {getattr(statuses[0], 'SerialNo', None)})")
