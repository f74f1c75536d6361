from risou.db import Base, engine, session_scope
from risou import models
from risou.engine import analyze
from risou.settings import get_settings

SAMPLES = [
    ("毎日20分、週3回英語を勉強したい。TOEIC800点を目指す。", "auto"),
    ("仕事が忙しくて運動が続かない。体重を5kg減らしたい。", "auto"),
    ("毎月3万円貯金したいが、家計簿アプリは三日坊主。", "auto"),
    ("朝の読書習慣を続けている。記録は毎週振り返っている。", "auto"),
    ("家族ともっと話す時間を作りたい。", "relationship"),
    ("何から始めればいいかわからない。", "auto"),
]


def seed_demo():
    Base.metadata.create_all(bind=engine)
    settings = get_settings()
    with session_scope() as db:
        if db.query(models.Analysis).first():
            print("Analyses already present; skipping.")
            return
        for text, category in SAMPLES:
            r = analyze(text, category)
            s = r.scores
            db.add(models.Analysis(
                input_text=r.text,
                requested_category=category,
                category=r.category,
                source=models.SourceEnum.LOCAL,
                clarity=s.clarity,
                execution=s.execution,
                planning=s.planning,
                resources=s.resources,
                feedback=s.feedback,
                overall=s.overall,
                overall_delay=r.delays.overall,
                quantities=[q.to_dict() for q in r.quantities],
                app_version=settings.APP_VERSION,
                engine_version=settings.ENGINE_VERSION,
                schema_version=settings.SCHEMA_VERSION,
            ))
            print(f"{r.category:<12} overall={s.overall:>3} delay={r.delays.overall:>3}分  {r.text}")
    print("Seeded demo analyses.")


if __name__ == "__main__":
    seed_demo()
