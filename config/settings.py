"""
Settings Configuration
使用 Pydantic 进行配置验证和管理
"""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ArticleSettings(BaseSettings):
    """文章生成配置"""
    num: int = Field(default=10, ge=1, description="每期发布的文章条数 (ARTICLE_NUM)")
    campaign_label: str = Field(default="AI速递", description="标题/封面使用的栏目名")
    sources_file: str = Field(default="config/sources.json", description="数据源列表文件")
    sources_category: str = Field(default="AI", description="数据源分类")
    
    class Config:
        env_prefix = "ARTICLE_"


class FireCrawlSettings(BaseSettings):
    """FireCrawl API 配置"""
    api_key: Optional[str] = Field(default=None, description="FireCrawl API Key")
    base_url: str = Field(default="https://api.firecrawl.dev", description="API 地址")
    
    class Config:
        env_prefix = "FIRECRAWL_"


class TwitterSettings(BaseSettings):
    """Twitter/X API 配置"""
    bearer_token: Optional[str] = Field(default=None, description="Twitter Bearer Token")
    max_results: int = Field(default=20, description="每个账号抓取的推文数")
    
    class Config:
        env_prefix = "TWITTER_"


class LLMSettings(BaseSettings):
    """LLM 配置"""
    provider: str = Field(default="deepseek", description="LLM提供商: openai, deepseek")
    model_name: Optional[str] = Field(default=None, description="模型名称(不填则使用默认)")
    temperature: float = Field(default=0.7, description="生成温度")
    max_tokens: int = Field(default=4096, description="最大生成token数")
    
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API Key")
    deepseek_api_key: Optional[str] = Field(default=None, description="DeepSeek API Key")
    min_balance_cny: float = Field(default=1.0, description="余额告警阈值(元)")
    
    class Config:
        env_prefix = "LLM_"


class DashScopeSettings(BaseSettings):
    """阿里云百炼 (通义万相) 图像生成配置"""
    api_key: Optional[str] = Field(default=None, description="DashScope API Key")
    base_url: str = Field(default="https://dashscope.aliyuncs.com/api/v1", description="API 地址")
    poll_interval: float = Field(default=3.0, description="任务轮询间隔(秒)")
    max_wait: float = Field(default=300.0, description="任务最长等待时间(秒)")
    
    class Config:
        env_prefix = "DASHSCOPE_"


class WeixinSettings(BaseSettings):
    """微信公众号配置"""
    app_id: Optional[str] = Field(default=None, description="公众号 AppID")
    app_secret: Optional[str] = Field(default=None, description="公众号 AppSecret")
    base_url: str = Field(default="https://api.weixin.qq.com/cgi-bin", description="API 地址")
    author: str = Field(default="", description="文章作者")
    auto_publish: bool = Field(default=True, description="False 时只保存草稿")
    
    class Config:
        env_prefix = "WEIXIN_"


class BarkSettings(BaseSettings):
    """Bark 推送配置"""
    key: Optional[str] = Field(default=None, description="Bark 设备 Key")
    base_url: str = Field(default="https://api.day.app", description="Bark 服务地址")
    group: str = Field(default="digest-publisher", description="通知分组")
    
    class Config:
        env_prefix = "BARK_"


class GeneralSettings(BaseSettings):
    """通用设置"""
    request_timeout: int = Field(default=30, description="请求超时时间(秒)")
    max_retries: int = Field(default=3, description="最大重试次数")
    
    class Config:
        env_prefix = "GENERAL_"


class Settings(BaseSettings):
    """主配置类 - 聚合所有子配置"""
    
    article: ArticleSettings = Field(default_factory=ArticleSettings)
    firecrawl: FireCrawlSettings = Field(default_factory=FireCrawlSettings)
    twitter: TwitterSettings = Field(default_factory=TwitterSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    dashscope: DashScopeSettings = Field(default_factory=DashScopeSettings)
    weixin: WeixinSettings = Field(default_factory=WeixinSettings)
    bark: BarkSettings = Field(default_factory=BarkSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
    
    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """从指定的 .env 文件加载配置"""
        if env_path is None:
            env_path = Path(__file__).resolve().parent.parent / ".env"
        
        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)
        
        return cls(
            article=ArticleSettings(),
            firecrawl=FireCrawlSettings(),
            twitter=TwitterSettings(),
            llm=LLMSettings(),
            dashscope=DashScopeSettings(),
            weixin=WeixinSettings(),
            bark=BarkSettings(),
            general=GeneralSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """获取全局配置单例"""
    return Settings.load_from_env_file()


def get_article_settings() -> ArticleSettings:
    return get_settings().article


def get_llm_settings() -> LLMSettings:
    return get_settings().llm
