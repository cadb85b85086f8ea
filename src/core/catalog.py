"""Default category catalog.

The catalog is a static table of plain records. Changing any entry changes
classification output, so bump CATALOG_VERSION whenever it is edited and
reprocess stored posts if historical consistency matters.
"""

from __future__ import annotations

CATALOG_VERSION = "2024.1"

FALLBACK_CATEGORY = "其他"
FALLBACK_CONFIDENCE = 0.1

DEFAULT_CATALOG: tuple[dict, ...] = (
    {
        "name": "美妆护肤",
        "keywords": [
            "护肤", "美妆", "化妆", "面膜", "精华", "防晒", "卸妆", "洁面",
            "保湿", "美白", "抗老", "祛痘", "眼霜", "乳液", "面霜", "口红",
            "彩妆", "粉底", "遮瑕", "眉毛", "眼影", "腮红", "指甲油",
        ],
        "patterns": [
            "护肤|美妆|化妆|彩妆",
            "面膜|精华|防晒|卸妆",
            "口红|粉底|眼影|腮红",
        ],
        "priority": 1,
    },
    {
        "name": "时尚穿搭",
        "keywords": [
            "穿搭", "时尚", "服装", "搭配", "衣服", "裤子", "裙子", "鞋子",
            "包包", "配饰", "首饰", "手表", "帽子", "围巾", "外套", "毛衣",
            "连衣裙", "牛仔裤", "高跟鞋", "运动鞋", "靴子",
        ],
        "patterns": [
            "穿搭|时尚|服装|搭配",
            "衣服|裤子|裙子|鞋子",
            "包包|配饰|首饰",
        ],
        "priority": 2,
    },
    {
        "name": "美食",
        "keywords": [
            "美食", "料理", "菜谱", "做饭", "烹饪", "餐厅", "小吃", "甜品",
            "蛋糕", "面包", "火锅", "烧烤", "炒菜", "汤", "粥", "面条",
            "饺子", "包子", "披萨", "寿司", "咖啡", "奶茶", "饮品",
        ],
        "patterns": [
            "美食|料理|菜谱|做饭|烹饪",
            "餐厅|小吃|甜品|蛋糕",
            "火锅|烧烤|炒菜|面条",
        ],
        "priority": 3,
    },
    {
        "name": "旅游",
        "keywords": [
            "旅游", "旅行", "游记", "攻略", "景点", "酒店", "民宿", "机票",
            "自驾", "徒步", "爬山", "海边", "古镇", "城市", "国外", "国内",
            "拍照", "风景", "文化", "历史", "博物馆", "寺庙",
        ],
        "patterns": [
            "旅游|旅行|游记|攻略",
            "景点|酒店|民宿",
            "自驾|徒步|爬山|海边",
        ],
        "priority": 4,
    },
    {
        "name": "生活方式",
        "keywords": [
            "生活", "日常", "家居", "装修", "收纳", "清洁", "植物", "宠物",
            "读书", "音乐", "电影", "摄影", "手工", "DIY", "艺术", "绘画",
            "书法", "花艺", "茶道", "咖啡", "香薰", "瑜伽", "冥想",
        ],
        "patterns": [
            "生活|日常|家居|装修",
            "收纳|清洁|植物|宠物",
            "读书|音乐|电影|摄影",
        ],
        "priority": 5,
    },
    {
        "name": "健身运动",
        "keywords": [
            "健身", "运动", "锻炼", "减肥", "瘦身", "塑形", "肌肉", "力量",
            "跑步", "游泳", "瑜伽", "普拉提", "舞蹈", "球类", "户外", "登山",
            "骑行", "马拉松", "健康", "营养", "蛋白质", "卡路里",
        ],
        "patterns": [
            "健身|运动|锻炼|减肥",
            "瘦身|塑形|肌肉|力量",
            "跑步|游泳|瑜伽|普拉提",
        ],
        "priority": 6,
    },
    {
        "name": "学习工作",
        "keywords": [
            "学习", "工作", "职场", "考试", "学生", "上班", "技能", "培训",
            "英语", "编程", "设计", "写作", "演讲", "时间管理", "效率", "笔记",
            "规划", "目标", "成长", "自律", "习惯", "思维", "方法",
        ],
        "patterns": [
            "学习|工作|职场|考试",
            "技能|培训|英语|编程",
            "效率|笔记|规划|目标",
        ],
        "priority": 7,
    },
)


def category_names(catalog=DEFAULT_CATALOG) -> list[str]:
    """Return every category name in catalog order, fallback last."""

    names = [entry["name"] for entry in catalog if entry.get("enabled", True)]
    if FALLBACK_CATEGORY not in names:
        names.append(FALLBACK_CATEGORY)
    return names
