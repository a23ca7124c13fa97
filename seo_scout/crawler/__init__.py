"""seo_scout.crawler: обход сайта — очередь, загрузка страниц, фильтр ссылок."""
