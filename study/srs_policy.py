# -*- coding: utf-8 -*-
"""
SRS 策略参数（集中管理，便于调参）
"""
POLICY = {
    # SM-2 初始/下限
    "init_ease": 2.5,
    "min_ease": 1.3,

    # Hard：降 ease，间隔减半
    "hard_ease_delta": 0.15,
    "hard_interval_factor": 0.5,

    # Easy：升 ease，并额外乘以奖励系数
    "easy_ease_delta": 0.15,
    "easy_bonus": 1.3,

    # 新词（interval=0）第一次反馈后的间隔（天）
    "first_interval_days": 1,

    # 熟练度阈值（按 review_count）
    "intermediate_reviews": 2,
    "advanced_reviews": 3,
}
