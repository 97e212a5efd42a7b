"""Prompt text for self-introduction generation.

Placeholders use single braces, e.g. {duration}; see selfintro.templating.
"""

DEFAULT_TEMPLATE_ID = "default"
DEFAULT_TEMPLATE_NAME = "預設模板"
DEFAULT_TEMPLATE_DESCRIPTION = "預設的自我介紹生成模板"

DEFAULT_PROMPT_TEMPLATE = (
    "請根據以下信息生成一份專業的自我介紹，時間約為{duration}秒，語言為{language}，"
    "風格為{style}，重點突出{keywords}。自我介紹應包含個人背景、教育經歷、專業技能和工作經驗，"
    "特別強調與{industry}行業和{job_position}職位相關的能力和經驗。"
)

# ── Provider system prompts ───────────────────────────────────────────────────

OPENAI_SYSTEM_PROMPT = (
    "你是一位專業的自我介紹生成助手，能夠根據個人資料和目標職位生成量身訂製的自我介紹。"
    "請確保內容符合用戶的目標場景和風格要求。"
)

GEMINI_SYSTEM_PROMPT = (
    "你是一位擅長撰寫口語化自我介紹講稿的寫作助手。"
    "請只輸出可以直接朗讀的講稿內容，不要加入標題、註解或說明。"
)

# ── Label maps for flattened profile fields ───────────────────────────────────

DEGREE_LABELS = {
    "high_school": "高中",
    "associate": "專科",
    "bachelor": "學士",
    "master": "碩士",
    "phd": "博士",
    "other": "其他",
}

SKILL_LEVEL_LABELS = {
    "beginner": "入門",
    "intermediate": "中級",
    "advanced": "進階",
    "expert": "專家",
}

STRUCTURE_INSTRUCTIONS = {
    "skills_first": "先介紹專業技能和經驗，再提及學歷背景。",
    "education_first": "先介紹學歷背景，再提及專業技能和經驗。",
    "chronological": "按時間順序介紹學歷和經驗。",
    "achievement_focused": "以成就和項目為主要結構。",
}
DEFAULT_STRUCTURE_INSTRUCTION = "結構合理，重點突出。"

# ── Standard prompt (used when no custom template is active) ─────────────────

STANDARD_PROMPT_HEAD = (
    "請根據以下資訊生成一份專業的{job_position}自我介紹，"
    "時間約為{duration}秒，使用{language}，風格為{style}，語調{tone}，"
)
STANDARD_FOCUS_AREAS = "重點突出{focus_areas}，"
STANDARD_KEYWORDS = "並強調以下關鍵詞：{keywords}。"
STANDARD_STRUCTURE = "\n\n自我介紹結構要求：{structure_instruction}"
STANDARD_OUTPUT_LENGTH = "\n輸出長度：{output_length}。"

HIGHLIGHT_STRENGTHS_INSTRUCTION = "\n請特別強調我的優勢和特長。"
CALL_TO_ACTION_INSTRUCTION = "\n在結尾加入呼籲行動的語句。"
RECENT_EXPERIENCE_INSTRUCTION = "\n請著重於我最近的經驗。"

# ── Appended context blocks ──────────────────────────────────────────────────

PERSONAL_INFO_HEADER = "\n\n個人資料："
PERSONAL_INFO_FIELDS = [
    ("name", "姓名"),
    ("age", "年齡"),
    ("education", "學歷"),
    ("work_experience", "工作經驗"),
    ("skills", "專業技能"),
    ("projects", "項目經歷"),
    ("awards", "獲獎記錄"),
    ("interests", "興趣愛好"),
]

TARGET_POSITION_HEADER = "\n\n目標產業和職位："
TARGET_POSITION_FIELDS = [
    ("industry", "產業"),
    ("job_category", "職業類別"),
    ("job_subcategory", "職業細類"),
    ("job_position", "特定職位"),
    ("occasion_type", "場合類型"),
]
