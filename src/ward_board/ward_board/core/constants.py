"""Constants and defaults.

Note: Keep collection names and UI strings here instead of spreading them across modules.
"""

MESSAGES_COLLECTION = "messages"
ALLOWED_USERS_COLLECTION = "allowedUsers"
STAFF_COLLECTION = "staff"
CLOCKINGS_COLLECTION = "clockings"

MESSAGES_ORDER_KEY = "createdAt"
CLOCKINGS_ORDER_KEY = "timestamp"

DEFAULT_WARD = "1st"
CLOCK_SOURCE = "scanned-input"
DISPLAY_DATETIME_FORMAT = "%Y/%m/%d %H:%M"

DELETE_CONFIRM_PROMPT = "この投稿を削除しますか？"
ACCESS_DENIED_MESSAGE = "このアカウントでは掲示板を利用できません"
STORE_FAILURE_MESSAGE = "通信エラーが発生しました。時間をおいて再度お試しください"
CLOCK_FAILURE_MESSAGE = "打刻エラーが発生しました"

GUIDE_LINES = (
    "楽仙堂掲示板は、病棟ごとの情報共有を目的とした掲示板です。",
    "・上部タブから病棟を選んでください。",
    "・タイトルとメッセージを入力して「投稿」するとスレッドが作成されます。",
    "・返信は各投稿の下部から行えます。",
)
