from dataclasses import dataclass
from enum import Enum


class MessageCode(str, Enum):
    INVALID_ACCESS = "invalid_access"

    REGISTERED = "registered"
    LOGGED_IN = "logged_in"
    LOGGED_OUT = "logged_out"
    PROFILE_UPDATED = "profile_updated"

    RESERVATION_CREATED = "reservation_created"
    RESERVATION_CANCELED = "reservation_canceled"

    REVIEW_CREATED = "review_created"
    REVIEW_UPDATED = "review_updated"
    REVIEW_DELETED = "review_deleted"

    FAVORITE_ADDED = "favorite_added"
    FAVORITE_REMOVED = "favorite_removed"

    SUBSCRIPTION_CREATED = "subscription_created"
    PAYMENT_METHOD_UPDATED = "payment_method_updated"
    SUBSCRIPTION_CANCELED = "subscription_canceled"

    RESTAURANT_CREATED = "restaurant_created"
    RESTAURANT_UPDATED = "restaurant_updated"
    RESTAURANT_DELETED = "restaurant_deleted"
    CATEGORY_CREATED = "category_created"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"
    COMPANY_UPDATED = "company_updated"
    TERMS_UPDATED = "terms_updated"


@dataclass(frozen=True)
class MessageDef:
    code: MessageCode
    text: str


# Flash texts shown by the front-end. Cookies carry only the code.
MESSAGES: list[MessageDef] = [
    MessageDef(MessageCode.INVALID_ACCESS, "不正なアクセスです。"),

    MessageDef(MessageCode.REGISTERED, "会員登録が完了しました。"),
    MessageDef(MessageCode.LOGGED_IN, "ログインしました。"),
    MessageDef(MessageCode.LOGGED_OUT, "ログアウトしました。"),
    MessageDef(MessageCode.PROFILE_UPDATED, "会員情報を編集しました。"),

    MessageDef(MessageCode.RESERVATION_CREATED, "予約が完了しました。"),
    MessageDef(MessageCode.RESERVATION_CANCELED, "予約をキャンセルしました。"),

    MessageDef(MessageCode.REVIEW_CREATED, "レビューを投稿しました。"),
    MessageDef(MessageCode.REVIEW_UPDATED, "レビューを編集しました。"),
    MessageDef(MessageCode.REVIEW_DELETED, "レビューを削除しました。"),

    MessageDef(MessageCode.FAVORITE_ADDED, "お気に入りに追加しました。"),
    MessageDef(MessageCode.FAVORITE_REMOVED, "お気に入りを解除しました。"),

    MessageDef(MessageCode.SUBSCRIPTION_CREATED, "有料プランへの登録が完了しました。"),
    MessageDef(MessageCode.PAYMENT_METHOD_UPDATED, "お支払い方法を変更しました。"),
    MessageDef(MessageCode.SUBSCRIPTION_CANCELED, "有料プランを解約しました。"),

    MessageDef(MessageCode.RESTAURANT_CREATED, "店舗を登録しました。"),
    MessageDef(MessageCode.RESTAURANT_UPDATED, "店舗を編集しました。"),
    MessageDef(MessageCode.RESTAURANT_DELETED, "店舗を削除しました。"),
    MessageDef(MessageCode.CATEGORY_CREATED, "カテゴリを登録しました。"),
    MessageDef(MessageCode.CATEGORY_UPDATED, "カテゴリを編集しました。"),
    MessageDef(MessageCode.CATEGORY_DELETED, "カテゴリを削除しました。"),
    MessageDef(MessageCode.COMPANY_UPDATED, "会社概要を編集しました。"),
    MessageDef(MessageCode.TERMS_UPDATED, "利用規約を編集しました。"),
]

MESSAGE_TEXTS: dict[MessageCode, str] = {m.code: m.text for m in MESSAGES}


def message_text(code: MessageCode) -> str:
    return MESSAGE_TEXTS.get(code, "")
